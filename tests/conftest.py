"""Shared pytest fixtures for Podsync tests."""

import json
from collections.abc import Callable
from unittest.mock import Mock
from xml.sax.saxutils import escape

import pytest
import requests


def _make_response(
    status_code: int = 200,
    content: bytes | str = b"",
    json_data: object = None,
    url: str = "http://test.invalid/",
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.reason = "OK" if status_code < 400 else "Error"
    if json_data is not None:
        content = json.dumps(json_data)
    response._content = content.encode("utf-8") if isinstance(content, str) else content
    return response


def _rss_feed(urls: list[str | None], title: str = "Test Podcast") -> str:
    items = []
    for index, url in enumerate(urls, start=1):
        enclosure = (
            f'<enclosure url="{escape(url)}" type="audio/mpeg" length="1000"/>' if url else ""
        )
        items.append(
            f"<item><title>Episode {index}</title>"
            f"<guid>episode-{index}</guid>{enclosure}</item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"<title>{title}</title><link>https://example.com/</link>"
        "<description>A test feed</description>"
        f"{''.join(items)}"
        "</channel></rss>"
    )


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Factory for canned requests.Response objects."""
    return _make_response


@pytest.fixture
def rss_feed() -> Callable[..., str]:
    """Factory for RSS 2.0 documents with one enclosure per URL (None = no enclosure)."""
    return _rss_feed


@pytest.fixture
def mock_session() -> Mock:
    """A requests.Session stand-in."""
    return Mock(spec=requests.Session)


@pytest.fixture
def sample_config_dict() -> dict:
    """Sample configuration mapping."""
    return {
        "espuino": {
            "host": "espuino.local",
            "path": "/podcasts",
        },
        "podcast.news": {
            "url": "https://example.com/news.xml",
            "num": 5,
            "reverse": False,
        },
        "podcast.story": {
            "url": "https://example.com/story.xml",
            "reverse": True,
            "file": "story.m3u",
        },
    }
