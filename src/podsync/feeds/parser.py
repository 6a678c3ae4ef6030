"""RSS/Atom feed resolver using feedparser.

Turns a podcast feed into the ordered list of device-safe media URLs that
make up a playlist.
"""

import logging
from collections.abc import Sequence
from typing import Any

import feedparser
import requests

from podsync.feeds.models import EpisodeRef
from podsync.http import DEFAULT_TIMEOUT
from podsync.utils.errors import FetchError, MissingMediaError, ParseError

logger = logging.getLogger(__name__)


def apply_order(
    episodes: Sequence[EpisodeRef],
    truncate: int | None = None,
    reverse: bool = False,
) -> list[EpisodeRef]:
    """Apply the reverse/truncate policy to a resolved episode list.

    Reversal happens first, so truncation always keeps the head of the
    (possibly reversed) sequence.
    """
    ordered = list(episodes)
    if reverse:
        ordered.reverse()
    if truncate is not None:
        ordered = ordered[:truncate]
    return ordered


class RSSParser:
    """Fetches podcast feeds and extracts their media URLs.

    Example:
        parser = RSSParser(session)
        episodes = parser.resolve("https://example.com/feed.xml", truncate=5)
        for episode in episodes:
            print(episode.url)
    """

    def __init__(self, session: requests.Session, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize the RSS parser.

        Args:
            session: Shared HTTP session used for feed downloads
            timeout: HTTP request timeout in seconds
        """
        self.session = session
        self.timeout = timeout

    def fetch(self, url: str) -> bytes:
        """Download a feed document.

        Raises:
            FetchError: On network failure, timeout or non-2xx status
        """
        logger.debug(f"Fetching feed: {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as e:
            raise FetchError(f"Timed out fetching {url} after {self.timeout}s", url=url) from e
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e
        return response.content

    def parse(self, content: bytes | str, url: str = "") -> list[EpisodeRef]:
        """Extract media URLs from feed content, in feed order.

        Entries without a usable enclosure are skipped with a warning.

        Args:
            content: RSS or Atom document
            url: Feed URL, used for error reporting

        Returns:
            Episode references in the order the feed lists them

        Raises:
            ParseError: If the content is not a syndication feed
            MissingMediaError: If the feed has entries but none carries media
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        feed = feedparser.parse(content)

        if not feed.get("version"):
            reason = feed.get("bozo_exception") or "not an RSS or Atom document"
            raise ParseError(
                f"Could not parse feed {url or '<content>'}: {reason}",
                url=url,
            )
        if feed.bozo:
            logger.debug(f"Feed parsing warning for {url}: {feed.get('bozo_exception')}")

        episodes: list[EpisodeRef] = []
        for index, entry in enumerate(feed.entries):
            media_url = self._first_media_url(entry)
            title = entry.get("title")
            if not media_url:
                logger.warning(f"Skipping entry {index} ({title!r}) of {url}: no media enclosure")
                continue
            try:
                episodes.append(EpisodeRef.from_enclosure(media_url, title=title))
            except ValueError as e:
                logger.warning(f"Skipping entry {index} ({title!r}) of {url}: {e}")

        if feed.entries and not episodes:
            raise MissingMediaError(
                f"None of the {len(feed.entries)} entries in {url} has a media enclosure",
                url=url,
            )

        return episodes

    def resolve(
        self,
        url: str,
        truncate: int | None = None,
        reverse: bool = False,
    ) -> list[EpisodeRef]:
        """Fetch a feed and return its playlist-ready episodes.

        Args:
            url: Feed URL
            truncate: Keep at most this many episodes
            reverse: Invert the feed order before truncating

        Returns:
            Ordered episode references

        Raises:
            FetchError: If the feed cannot be downloaded
            ParseError: If the feed cannot be parsed
            MissingMediaError: If no entry carries media
        """
        content = self.fetch(url)
        episodes = self.parse(content, url=url)
        return apply_order(episodes, truncate=truncate, reverse=reverse)

    @staticmethod
    def _first_media_url(entry: Any) -> str | None:
        """Select the first enclosure URL of an entry, else its first media:content URL."""
        enclosures = entry.get("enclosures") or []
        if enclosures and enclosures[0].get("href"):
            return enclosures[0]["href"]

        media_content = entry.get("media_content") or []
        if media_content and media_content[0].get("url"):
            return media_content[0]["url"]

        return None
