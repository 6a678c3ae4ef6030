"""M3U playlist building for Podsync."""

from podsync.playlist.m3u import Playlist, serialize, write_playlist

__all__ = ["Playlist", "serialize", "write_playlist"]
