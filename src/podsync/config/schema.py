"""Configuration schema models using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

DEFAULT_HOST = "espuino.local"
DEFAULT_BASE_PATH = "/podcasts/"
SUBSCRIPTION_PREFIX = "podcast."


class DeviceConfig(BaseModel):
    """Connection settings for the ESPuino device (the `espuino` section)."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    path: str = DEFAULT_BASE_PATH
    proxy: str | None = None  # Forward proxy for all HTTP calls, useful for debugging
    timeout: float = Field(default=30.0, gt=0)
    workers: int = Field(default=4, ge=1, le=32)

    @field_validator("host")
    @classmethod
    def _strip_host(cls, value: str) -> str:
        value = value.strip()
        scheme, separator, rest = value.partition("://")
        if separator:
            if scheme.lower() not in ("http", "https"):
                raise ValueError(f"unsupported scheme {scheme!r} in host")
            # The device only speaks plain HTTP, so an https:// prefix is dropped too
            value = rest
        value = value.rstrip("/")
        if not value:
            raise ValueError("host must not be empty")
        return value

    @field_validator("path")
    @classmethod
    def _normalize_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = "/" + value
        if not value.endswith("/"):
            value += "/"
        return value


class Subscription(BaseModel):
    """Configuration for a single podcast subscription (a `podcast.<name>` section)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    feed_url: HttpUrl = Field(alias="url")
    truncate: int | None = Field(default=None, ge=0, alias="num")
    reverse: bool = False
    local_file: Path | None = Field(default=None, alias="file")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError(f"invalid podcast name {value!r}")
        return value

    @property
    def playlist_filename(self) -> str:
        return f"{self.name}.m3u"


class SyncConfig(BaseModel):
    """Validated configuration for one sync run."""

    model_config = ConfigDict(frozen=True)

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    subscriptions: tuple[Subscription, ...] = ()
    # Subscription sections that failed validation, name -> reason
    invalid: dict[str, str] = Field(default_factory=dict)
    # Names of all podcast sections, valid or not, in file order
    section_order: tuple[str, ...] = ()
