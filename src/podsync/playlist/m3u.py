"""M3U playlist serialization.

The device reads plain M3U: one URL per line, each newline-terminated,
UTF-8 encoded, without extended directives.
"""

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from podsync.feeds.models import EpisodeRef
from podsync.utils.errors import LocalIoError

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


def serialize(episodes: Iterable[EpisodeRef]) -> bytes:
    """Serialize episodes into M3U bytes."""
    return "".join(f"{episode.url}\n" for episode in episodes).encode(ENCODING)


def write_playlist(path: Path, episodes: Iterable[EpisodeRef]) -> Path:
    """Write episodes as an M3U file.

    The file is written to a temporary sibling and renamed into place, so an
    interrupted write never leaves a truncated playlist behind.

    Args:
        path: Target file path
        episodes: Episodes in playlist order

    Returns:
        The written path

    Raises:
        LocalIoError: If the file cannot be written
    """
    content = serialize(episodes)
    path = path.expanduser()

    try:
        temp_fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=".m3u")
    except OSError as e:
        raise LocalIoError(f"Cannot write playlist {path}: {e}", path=path) from e

    try:
        with open(temp_fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except OSError as e:
        Path(temp_path).unlink(missing_ok=True)
        raise LocalIoError(f"Cannot write playlist {path}: {e}", path=path) from e

    logger.debug(f"Wrote {len(content)} bytes to {path}")
    return path


class Playlist(BaseModel):
    """Ordered episode list for one subscription."""

    model_config = ConfigDict(frozen=True)

    name: str
    episodes: tuple[EpisodeRef, ...] = ()

    @property
    def filename(self) -> str:
        return f"{self.name}.m3u"

    def to_bytes(self) -> bytes:
        """Serialize the playlist for upload."""
        return serialize(self.episodes)

    def write(self, path: Path) -> Path:
        """Write the playlist to a local file."""
        return write_playlist(path, self.episodes)
