"""Configuration manager for loading the Podsync sync config."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from podsync.config.schema import (
    SUBSCRIPTION_PREFIX,
    DeviceConfig,
    Subscription,
    SyncConfig,
)
from podsync.utils.errors import ConfigNotFoundError, InvalidConfigError

logger = logging.getLogger(__name__)

DEVICE_SECTION = "espuino"


def _format_validation_error(error: ValidationError) -> str:
    """Condense a pydantic ValidationError into a single line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item["loc"]) or "value"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class ConfigManager:
    """Loads and validates a Podsync configuration file.

    The file is a YAML mapping with an `espuino` section for the device
    connection and one `podcast.<name>` section per subscription:

        espuino:
          host: espuino.local
          path: /podcasts/

        podcast.news:
          url: https://example.com/feed.xml
          num: 10
          reverse: false
    """

    def __init__(self, config_file: Path) -> None:
        """Initialize the config manager.

        Args:
            config_file: Path to the YAML configuration file
        """
        self.config_file = config_file

    def load(self) -> SyncConfig:
        """Load and validate the configuration.

        Invalid subscription sections do not fail the load; they are
        collected in `SyncConfig.invalid` so the run can report and skip them.

        Returns:
            Validated SyncConfig instance

        Raises:
            ConfigNotFoundError: If the config file doesn't exist
            InvalidConfigError: If the file or its device section is invalid
        """
        if not self.config_file.exists():
            raise ConfigNotFoundError(f"Config file not found: {self.config_file}")

        try:
            with open(self.config_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: expected a mapping of sections"
            )

        return self.parse(data)

    def parse(self, data: dict[str, Any]) -> SyncConfig:
        """Build a SyncConfig from an already loaded mapping.

        Args:
            data: Mapping of section name to section contents

        Returns:
            Validated SyncConfig instance

        Raises:
            InvalidConfigError: If the device section is invalid
        """
        device_data = data.get(DEVICE_SECTION) or {}
        if not isinstance(device_data, dict):
            raise InvalidConfigError(f"Section '{DEVICE_SECTION}' must be a mapping")
        try:
            device = DeviceConfig.model_validate(device_data)
        except ValidationError as e:
            raise InvalidConfigError(
                f"Invalid '{DEVICE_SECTION}' section: {_format_validation_error(e)}"
            ) from e

        subscriptions: list[Subscription] = []
        invalid: dict[str, str] = {}
        section_order: list[str] = []

        for key, values in data.items():
            # YAML turns keys like `2024:` into ints
            section = str(key)
            if section == DEVICE_SECTION:
                continue
            if not section.startswith(SUBSCRIPTION_PREFIX):
                logger.debug(f"Ignoring unknown config section '{section}'")
                continue

            name = section[len(SUBSCRIPTION_PREFIX) :]
            section_order.append(name)
            if not isinstance(values, dict) or "url" not in values:
                invalid[name] = f"Section {section} is missing a url entry"
                logger.warning(invalid[name])
                continue

            try:
                subscriptions.append(Subscription(name=name, **values))
            except (TypeError, ValidationError) as e:
                reason = (
                    _format_validation_error(e) if isinstance(e, ValidationError) else str(e)
                )
                invalid[name] = f"Invalid section {section}: {reason}"
                logger.warning(invalid[name])

        logger.debug(
            f"Loaded {len(subscriptions)} subscription(s), {len(invalid)} invalid"
        )
        return SyncConfig(
            device=device,
            subscriptions=tuple(subscriptions),
            invalid=invalid,
            section_order=tuple(section_order),
        )
