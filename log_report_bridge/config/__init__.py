"""
Configuration Management Module.

Handles loading and validation of:
- The report bridge configuration file (YAML/JSON).
- JSON schemas shipped with the package.
"""

from log_report_bridge.config.loader import ConfigLoader, ConfigurationError
from log_report_bridge.config.schema_registry import SchemaRegistry, SchemaValidationError
from log_report_bridge.config.settings import BridgeSettings, apply_overrides, load_bridge_settings

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "SchemaRegistry",
    "SchemaValidationError",
    "BridgeSettings",
    "apply_overrides",
    "load_bridge_settings",
]
