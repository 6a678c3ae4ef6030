"""Feed resolution and podcast search for Podsync."""

from podsync.feeds.models import EpisodeRef, normalize_media_url
from podsync.feeds.parser import RSSParser
from podsync.feeds.search import PodcastSearch, SearchResult

__all__ = ["EpisodeRef", "normalize_media_url", "RSSParser", "PodcastSearch", "SearchResult"]
