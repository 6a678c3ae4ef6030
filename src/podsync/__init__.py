"""Podsync - Sync podcast feeds as playlists onto an ESPuino player."""

__version__ = "0.1.0"
