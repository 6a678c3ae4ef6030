"""Utility functions and helpers for Podsync."""

from podsync.utils.errors import (
    ConfigError,
    ConfigNotFoundError,
    DeviceApiError,
    FeedError,
    FetchError,
    InvalidConfigError,
    LocalIoError,
    MissingMediaError,
    ParseError,
    PodsyncError,
    SearchError,
)

__all__ = [
    "PodsyncError",
    "ConfigError",
    "InvalidConfigError",
    "ConfigNotFoundError",
    "FeedError",
    "FetchError",
    "ParseError",
    "MissingMediaError",
    "LocalIoError",
    "DeviceApiError",
    "SearchError",
]
