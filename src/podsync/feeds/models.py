"""Data models for resolved podcast episodes."""

from urllib.parse import urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict


def normalize_media_url(url: str) -> str:
    """Rewrite a media URL into a form the ESPuino can play.

    The device only streams plain HTTP without URL parameters, so `https`
    becomes `http` and the query string is dropped. The fragment is kept.

    Args:
        url: Absolute media URL from a feed enclosure

    Returns:
        Normalized URL

    Raises:
        ValueError: If the URL is not absolute
    """
    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"not an absolute URL: {url!r}")

    scheme = parts.scheme.lower()
    if scheme == "https":
        scheme = "http"

    return urlunsplit((scheme, parts.netloc, parts.path, "", parts.fragment))


class EpisodeRef(BaseModel):
    """One playable, device-safe media URL resolved from a feed entry."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str | None = None

    @classmethod
    def from_enclosure(cls, url: str, title: str | None = None) -> "EpisodeRef":
        """Create a reference from a raw enclosure URL, normalizing it."""
        return cls(url=normalize_media_url(url), title=title)
