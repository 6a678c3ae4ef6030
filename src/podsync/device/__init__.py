"""Client for the ESPuino explorer API."""

from podsync.device.client import DeviceClient, RemoteEntry

__all__ = ["DeviceClient", "RemoteEntry"]
