"""Custom exceptions for Podsync."""

from pathlib import Path


class PodsyncError(Exception):
    """Base exception for all Podsync errors."""

    pass


class ConfigError(PodsyncError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class ConfigNotFoundError(ConfigError):
    """Configuration file not found."""

    pass


class FeedError(PodsyncError):
    """Feed resolution errors.

    Attributes:
        url: The feed URL that could not be resolved
    """

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class FetchError(FeedError):
    """Feed could not be downloaded (network, HTTP status or timeout)."""

    pass


class ParseError(FeedError):
    """Feed body is not a parseable RSS or Atom document."""

    pass


class MissingMediaError(FeedError):
    """No entry of the feed carries a usable media enclosure."""

    pass


class LocalIoError(PodsyncError):
    """Writing a playlist to the local filesystem failed."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class DeviceApiError(PodsyncError):
    """A call to the device explorer API failed.

    Attributes:
        operation: API operation that failed (list, mkdir, upload)
        path: Remote path the operation targeted
    """

    def __init__(self, message: str, operation: str = "", path: str = "") -> None:
        super().__init__(message)
        self.operation = operation
        self.path = path


class SearchError(PodsyncError):
    """Podcast directory search failed."""

    pass
