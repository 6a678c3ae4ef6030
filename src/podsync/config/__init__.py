"""Configuration loading and validation for Podsync."""

from podsync.config.manager import ConfigManager
from podsync.config.schema import DeviceConfig, Subscription, SyncConfig

__all__ = ["ConfigManager", "DeviceConfig", "Subscription", "SyncConfig"]
