"""Tests for ConfigManager."""

from pathlib import Path

import pytest
import yaml

from podsync.config.manager import ConfigManager
from podsync.config.schema import DeviceConfig, Subscription
from podsync.utils.errors import ConfigNotFoundError, InvalidConfigError


def write_config(path: Path, data: object) -> Path:
    config_file = path / "podsync.yaml"
    with open(config_file, "w") as f:
        yaml.safe_dump(data, f)
    return config_file


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_load_config_from_file(self, tmp_path: Path, sample_config_dict: dict) -> None:
        """Test loading a complete config file."""
        config = ConfigManager(write_config(tmp_path, sample_config_dict)).load()

        assert config.device.host == "espuino.local"
        assert config.device.path == "/podcasts/"
        assert [s.name for s in config.subscriptions] == ["news", "story"]
        assert config.invalid == {}

        news, story = config.subscriptions
        assert str(news.feed_url) == "https://example.com/news.xml"
        assert news.truncate == 5
        assert news.reverse is False
        assert news.local_file is None
        assert story.truncate is None
        assert story.reverse is True
        assert story.local_file == Path("story.m3u")

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Test that a missing config file is reported."""
        with pytest.raises(ConfigNotFoundError):
            ConfigManager(tmp_path / "missing.yaml").load()

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        """Test that unparsable YAML is rejected."""
        config_file = tmp_path / "podsync.yaml"
        config_file.write_text("espuino: [unclosed\n")

        with pytest.raises(InvalidConfigError):
            ConfigManager(config_file).load()

    def test_non_mapping_document_raises(self, tmp_path: Path) -> None:
        """Test that a YAML list is rejected."""
        with pytest.raises(InvalidConfigError, match="mapping"):
            ConfigManager(write_config(tmp_path, ["a", "b"])).load()

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        """Test that an empty config yields default device settings."""
        config_file = tmp_path / "podsync.yaml"
        config_file.write_text("")

        config = ConfigManager(config_file).load()

        assert config.device.host == "espuino.local"
        assert config.device.path == "/podcasts/"
        assert config.subscriptions == ()

    def test_invalid_device_section_raises(self, tmp_path: Path) -> None:
        """Test that an invalid device section fails the whole load."""
        data = {"espuino": {"workers": 0}}

        with pytest.raises(InvalidConfigError, match="espuino"):
            ConfigManager(write_config(tmp_path, data)).load()

    def test_missing_url_is_recorded(self, tmp_path: Path) -> None:
        """Test that a subscription without url is skipped, not fatal."""
        data = {
            "podcast.broken": {"num": 3},
            "podcast.ok": {"url": "https://example.com/feed.xml"},
        }

        config = ConfigManager(write_config(tmp_path, data)).load()

        assert [s.name for s in config.subscriptions] == ["ok"]
        assert "broken" in config.invalid
        assert "missing a url" in config.invalid["broken"]

    def test_empty_section_is_recorded(self, tmp_path: Path) -> None:
        """Test that an empty subscription section is reported."""
        config = ConfigManager(write_config(tmp_path, {"podcast.empty": None})).load()

        assert config.subscriptions == ()
        assert "empty" in config.invalid

    def test_invalid_values_are_recorded(self, tmp_path: Path) -> None:
        """Test that bad url and negative num are reported per subscription."""
        data = {
            "podcast.badurl": {"url": "not a url"},
            "podcast.negative": {"url": "https://example.com/feed.xml", "num": -1},
        }

        config = ConfigManager(write_config(tmp_path, data)).load()

        assert config.subscriptions == ()
        assert set(config.invalid) == {"badurl", "negative"}
        assert "num" in config.invalid["negative"]

    def test_unknown_sections_ignored(self, tmp_path: Path) -> None:
        """Test that sections without the podcast prefix are ignored."""
        data = {"general": {"foo": "bar"}, "podcast.a": {"url": "https://example.com/a.xml"}}

        config = ConfigManager(write_config(tmp_path, data)).load()

        assert [s.name for s in config.subscriptions] == ["a"]
        assert config.invalid == {}

    def test_reverse_string_is_coerced(self, tmp_path: Path) -> None:
        """Test that ini-style boolean strings are accepted."""
        data = {"podcast.a": {"url": "https://example.com/a.xml", "reverse": "yes"}}

        config = ConfigManager(write_config(tmp_path, data)).load()

        assert config.subscriptions[0].reverse is True


class TestSchema:
    """Tests for configuration models."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("/podcasts/", "/podcasts/"),
            ("/podcasts", "/podcasts/"),
            ("podcasts", "/podcasts/"),
            ("/", "/"),
            ("/a/b", "/a/b/"),
        ],
    )
    def test_device_path_normalized(self, raw: str, expected: str) -> None:
        """Test that the base path always starts and ends with a slash."""
        assert DeviceConfig(path=raw).path == expected

    def test_device_host_strips_scheme(self) -> None:
        """Test that a host given as URL is reduced to host[:port]."""
        device = DeviceConfig(host="http://192.168.1.40:8080/")

        assert device.host == "192.168.1.40:8080"

    def test_subscription_is_frozen(self) -> None:
        """Test that subscriptions cannot be modified after creation."""
        subscription = Subscription(name="a", url="https://example.com/a.xml")

        with pytest.raises(ValueError):
            subscription.reverse = True  # type: ignore[misc]

    def test_subscription_rejects_slash_in_name(self) -> None:
        """Test that names usable as filenames are enforced."""
        with pytest.raises(ValueError):
            Subscription(name="a/b", url="https://example.com/a.xml")

    def test_subscription_accepts_field_names(self) -> None:
        """Test construction by field name as well as config key."""
        subscription = Subscription(
            name="a", feed_url="https://example.com/a.xml", truncate=2, local_file="a.m3u"
        )

        assert subscription.truncate == 2
        assert subscription.playlist_filename == "a.m3u"


class TestSectionKeys:
    """Tests for unusual section keys and ordering."""

    def test_non_string_section_key_ignored(self) -> None:
        """Test that a numeric top-level key is treated as an unknown section."""
        config = ConfigManager(Path("unused.yaml")).parse(
            {
                "espuino": {},
                2024: {"url": "https://example.com/a.xml"},
                "podcast.a": {"url": "https://example.com/a.xml"},
            }
        )

        assert [s.name for s in config.subscriptions] == ["a"]
        assert config.invalid == {}

    def test_non_string_key_in_device_section(self) -> None:
        """Test that stray keys in the device section don't crash loading."""
        config = ConfigManager(Path("unused.yaml")).parse({"espuino": {1: "x", "host": "h"}})

        assert config.device.host == "h"

    def test_non_string_key_in_podcast_section_recorded(self) -> None:
        config = ConfigManager(Path("unused.yaml")).parse(
            {"podcast.a": {"url": "https://example.com/a.xml", 5: "x"}}
        )

        assert config.subscriptions == ()
        assert "a" in config.invalid

    def test_section_order_includes_invalid(self, tmp_path: Path) -> None:
        data = {
            "podcast.first": {"url": "https://example.com/1.xml"},
            "podcast.broken": {"num": 1},
            "podcast.last": {"url": "https://example.com/3.xml"},
        }

        config = ConfigManager(write_config(tmp_path, data)).load()

        assert config.section_order == ("first", "broken", "last")


class TestDeviceHost:
    """Tests for host normalization."""

    @pytest.mark.parametrize(
        "raw",
        ["espuino.local", "http://espuino.local", "https://espuino.local/", "HTTPS://espuino.local"],
    )
    def test_scheme_prefix_removed(self, raw: str) -> None:
        """Test that http and https prefixes both reduce to the bare host."""
        assert DeviceConfig(host=raw).host == "espuino.local"

    def test_other_scheme_rejected(self) -> None:
        with pytest.raises(ValueError, match="scheme"):
            DeviceConfig(host="ftp://espuino.local")
