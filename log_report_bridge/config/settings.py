"""
Bridge Settings Module.

Typed view of ``log_bridge.yaml``. Every key is optional; missing keys
keep the defaults below, and a missing file means all defaults.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from log_report_bridge.config.loader import ConfigLoader, ConfigurationError
from log_report_bridge.config.schema_registry import SchemaRegistry, SchemaValidationError
from log_report_bridge.reporting.bridge import DEFAULT_ATTACHMENT_TITLE, DEFAULT_LEVEL
from log_report_bridge.reporting.sink import TEXT_MEDIA_TYPE

DEFAULT_CONFIG_FILE = "log_bridge.yaml"

# Level names from other logging stacks mapped to their loguru equivalent
LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


@dataclass(frozen=True)
class BridgeSettings:
    """
    Report bridge settings.

    Attributes:
        enabled: Install the bridge for every test (pytest plugin).
        level: Minimum loguru level forwarded into the report.
        attachment_title: Title of every log attachment.
        media_type: MIME type of every log attachment.
    """

    enabled: bool = False
    level: str = DEFAULT_LEVEL
    attachment_title: str = DEFAULT_ATTACHMENT_TITLE
    media_type: str = TEXT_MEDIA_TYPE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeSettings":
        """Build settings from a (validated) config mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the settings to a dictionary."""
        return asdict(self)


def load_bridge_settings(
    config_dir: str | Path = "config",
    filename: str = DEFAULT_CONFIG_FILE,
    loader: Optional[ConfigLoader] = None,
) -> BridgeSettings:
    """
    Load bridge settings from the config directory.

    Args:
        config_dir: Directory holding the bridge config file.
        filename: Bridge config filename.
        loader: Existing ConfigLoader to reuse (its config_dir wins).

    Returns:
        BridgeSettings; defaults if the file does not exist.

    Raises:
        ConfigurationError: If the file exists but is invalid.
    """
    loader = loader or ConfigLoader(config_dir=config_dir)
    try:
        data = loader.load_log_bridge(filename)
    except FileNotFoundError:
        logger.debug(f"[Settings] {filename} not found, using default bridge settings")
        return BridgeSettings()

    settings = BridgeSettings.from_dict(data)
    logger.debug(f"[Settings] Bridge settings: {settings.to_dict()}")
    return settings


def apply_overrides(
    settings: BridgeSettings,
    enabled: Optional[bool] = None,
    level: Optional[str] = None,
    registry: Optional[SchemaRegistry] = None,
) -> BridgeSettings:
    """
    Apply command-line overrides on top of loaded settings.

    The merged result is validated against the bridge schema, so an
    override can never produce settings the config file could not hold.

    Args:
        settings: Settings loaded from the config file.
        enabled: Force the bridge on (True) or off (False); None keeps the file value.
        level: Level override, case-insensitive; WARN and FATAL are accepted.
        registry: Schema registry to validate with (default: bundled schemas).

    Returns:
        The merged BridgeSettings.

    Raises:
        ConfigurationError: If the merged settings fail validation.
    """
    data = settings.to_dict()
    if enabled is not None:
        data["enabled"] = enabled
    if level:
        level = level.upper()
        data["level"] = LEVEL_ALIASES.get(level, level)

    registry = registry or SchemaRegistry()
    try:
        registry.validate_log_bridge(data)
    except SchemaValidationError as e:
        raise ConfigurationError(f"Invalid report bridge override: {e}") from e

    return BridgeSettings.from_dict(data)
