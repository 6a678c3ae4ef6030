"""Tests for episode models and URL normalization."""

import pytest

from podsync.feeds.models import EpisodeRef, normalize_media_url


class TestNormalizeMediaUrl:
    """Test normalize_media_url function."""

    def test_https_with_query_becomes_plain_http(self) -> None:
        """Test scheme downgrade and query removal together."""
        url = "https://cdn.example.com/audio/ep1.mp3?source=rss&token=abc"

        assert normalize_media_url(url) == "http://cdn.example.com/audio/ep1.mp3"

    def test_plain_http_unchanged(self) -> None:
        """Test that an already device-safe URL is left alone."""
        url = "http://cdn.example.com/audio/ep1.mp3"

        assert normalize_media_url(url) == url

    def test_http_query_stripped(self) -> None:
        """Test that query parameters are dropped for http too."""
        assert (
            normalize_media_url("http://example.com/a.mp3?x=1") == "http://example.com/a.mp3"
        )

    def test_fragment_kept(self) -> None:
        """Test that only the query is removed."""
        assert (
            normalize_media_url("https://example.com/a.mp3?x=1#t=10")
            == "http://example.com/a.mp3#t=10"
        )

    def test_port_preserved(self) -> None:
        """Test that an explicit port survives the rewrite."""
        assert (
            normalize_media_url("https://example.com:8443/a.mp3")
            == "http://example.com:8443/a.mp3"
        )

    @pytest.mark.parametrize("url", ["", "/relative/path.mp3", "ep1.mp3"])
    def test_relative_url_rejected(self, url: str) -> None:
        """Test that non-absolute URLs raise ValueError."""
        with pytest.raises(ValueError, match="absolute"):
            normalize_media_url(url)


class TestEpisodeRef:
    """Test EpisodeRef model."""

    def test_from_enclosure_normalizes(self) -> None:
        """Test that the factory applies URL normalization."""
        episode = EpisodeRef.from_enclosure("https://example.com/a.mp3?x=1", title="A")

        assert episode.url == "http://example.com/a.mp3"
        assert episode.title == "A"
