"""HTTP client for the ESPuino file explorer API.

The device exposes its SD card through a single `/explorer` endpoint:

- `GET ?path=<dir>` lists a directory as JSON `[{"name": ..., "dir": ...}]`
- `PUT ?path=<dir>` creates a directory
- `POST ?path=<dir>` with a multipart `file` part uploads into `<dir>`
"""

import logging
import posixpath

import requests
from pydantic import BaseModel, ValidationError

from podsync.http import DEFAULT_TIMEOUT
from podsync.utils.errors import DeviceApiError

logger = logging.getLogger(__name__)


class RemoteEntry(BaseModel):
    """One entry of a device directory listing."""

    name: str
    dir: bool | None = None

    @property
    def is_directory(self) -> bool:
        return bool(self.dir)


def split_remote_path(remote_path: str) -> tuple[str, str]:
    """Split a remote file path into (parent directory, filename).

    Example:
        >>> split_remote_path("/podcasts/show.m3u")
        ('/podcasts', 'show.m3u')
    """
    parent, filename = posixpath.split(remote_path)
    if not filename:
        raise ValueError(f"remote path has no filename: {remote_path!r}")
    return parent or "/", filename


class DeviceClient:
    """Lists, creates and uploads files on an ESPuino over HTTP.

    One client wraps one shared requests session, so consecutive calls
    reuse the same connection to the device.

    Example:
        client = DeviceClient("espuino.local", session)
        for entry in client.list("/"):
            print(entry.name, entry.is_directory)
        client.upload("/podcasts/news.m3u", b"http://example.com/ep1.mp3\\n")
    """

    def __init__(
        self,
        host: str,
        session: requests.Session,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the device client.

        Args:
            host: Device host name or address, optionally with `:port`
            session: Shared HTTP session
            timeout: Per-request timeout in seconds
        """
        self.host = host
        self.session = session
        self.timeout = timeout
        self.api_url = f"http://{host}/explorer"

    def list(self, path: str) -> list[RemoteEntry]:
        """List a remote directory.

        Raises:
            DeviceApiError: If the request fails or the response is not a listing
        """
        response = self._request("GET", "list", path)
        try:
            data = response.json()
        except ValueError as e:
            raise DeviceApiError(
                f"list {path}: device returned invalid JSON", operation="list", path=path
            ) from e

        if not isinstance(data, list):
            raise DeviceApiError(
                f"list {path}: expected a JSON array, got {type(data).__name__}",
                operation="list",
                path=path,
            )
        try:
            return [RemoteEntry.model_validate(item) for item in data]
        except ValidationError as e:
            raise DeviceApiError(
                f"list {path}: malformed directory entry: {e}", operation="list", path=path
            ) from e

    def mkdir(self, path: str) -> None:
        """Create a remote directory.

        Raises:
            DeviceApiError: If the device rejects the request
        """
        logger.info(f"Creating directory {path} on {self.host}")
        self._request("PUT", "mkdir", path)

    def upload(self, remote_path: str, content: bytes) -> None:
        """Upload a file to the device.

        Args:
            remote_path: Full remote path including filename
            content: File contents

        Raises:
            DeviceApiError: If the upload fails
        """
        parent, filename = split_remote_path(remote_path)
        files = {"file": (filename, content, "application/octet-stream")}
        logger.debug(f"Uploading {len(content)} bytes to {remote_path}")
        self._request("POST", "upload", parent, files=files, target=remote_path)

    def exists_directory(self, path: str) -> bool:
        """Check whether a directory exists by listing its parent."""
        normalized = path.rstrip("/")
        if not normalized:
            return True
        parent, name = posixpath.split(normalized)
        entries = self.list(parent or "/")
        return any(entry.name == name and entry.is_directory for entry in entries)

    def _request(
        self,
        method: str,
        operation: str,
        path: str,
        files: dict | None = None,
        target: str | None = None,
    ) -> requests.Response:
        target = target or path
        try:
            response = self.session.request(
                method,
                self.api_url,
                params={"path": path},
                files=files,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise DeviceApiError(
                f"{operation} {target}: device at {self.host} timed out after {self.timeout}s",
                operation=operation,
                path=target,
            ) from e
        except requests.RequestException as e:
            raise DeviceApiError(
                f"{operation} {target}: {e}", operation=operation, path=target
            ) from e
        return response
