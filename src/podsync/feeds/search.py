"""Podcast directory search via the iTunes Search API."""

import logging

import requests
from pydantic import BaseModel, Field, ValidationError

from podsync.http import DEFAULT_TIMEOUT
from podsync.utils.errors import SearchError

logger = logging.getLogger(__name__)

ITUNES_SEARCH_URL = "https://itunes.apple.com/search"


class SearchResult(BaseModel):
    """A podcast found in the directory."""

    name: str = Field(alias="collectionName")
    feed_url: str = Field(alias="feedUrl")
    artist: str | None = Field(default=None, alias="artistName")


class PodcastSearch:
    """Looks up podcast feed URLs by search terms."""

    def __init__(
        self,
        session: requests.Session,
        timeout: float = DEFAULT_TIMEOUT,
        endpoint: str = ITUNES_SEARCH_URL,
    ) -> None:
        self.session = session
        self.timeout = timeout
        self.endpoint = endpoint

    def search(self, terms: str, limit: int = 20) -> list[SearchResult]:
        """Search the directory for podcasts.

        Only podcast results that publish a feed URL are returned.

        Args:
            terms: Free-text search terms
            limit: Maximum number of directory results to request

        Returns:
            Matching podcasts in directory ranking order

        Raises:
            SearchError: If the request fails or the response is malformed
        """
        logger.info(f'Searching for "{terms}"')
        params = {"term": terms, "media": "podcast", "entity": "podcast", "limit": limit}
        try:
            response = self.session.get(self.endpoint, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SearchError(f"Podcast search failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SearchError(f"Podcast search returned invalid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise SearchError("Podcast search returned an unexpected response")

        results: list[SearchResult] = []
        for item in payload.get("results", []):
            if item.get("kind") != "podcast" or not item.get("feedUrl"):
                continue
            try:
                results.append(SearchResult.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Ignoring malformed search result: {e}")

        logger.info(f"Found {len(results)} results")
        return results
