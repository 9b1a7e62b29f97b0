"""
Configuration Loader Module.

Provides the configuration loader used by the bridge and its pytest plugin:
- Loading YAML and JSON configuration files.
- Schema validation using JSON Schema.
- Caching of parsed files per resolved path.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from log_report_bridge.config.schema_registry import (
    BUNDLED_SCHEMA_DIR,
    LOG_BRIDGE_SCHEMA,
    SchemaRegistry,
)


class ConfigurationError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""

    pass


class ConfigLoader:
    """
    Configuration loader with schema validation.

    Attributes:
        config_dir: Base directory for configuration files.
        schema_registry: Registry of JSON schemas for validation.
    """

    SUPPORTED_EXTENSIONS = {".yaml", ".yml", ".json"}

    def __init__(
        self,
        config_dir: str | Path = "config",
        schema_dir: str | Path | None = None,
    ) -> None:
        """
        Initialize the configuration loader.

        Args:
            config_dir: Path to the directory containing configuration files.
            schema_dir: Path to the directory containing JSON schema files.
                        Defaults to the schemas shipped with the package.
        """
        self.config_dir = Path(config_dir)
        self.schema_registry = SchemaRegistry(schema_dir or BUNDLED_SCHEMA_DIR)
        self._cache: Dict[str, Dict[str, Any]] = {}

        logger.debug(f"ConfigLoader initialized — config_dir={self.config_dir}")

    def load(
        self,
        filename: str,
        schema_name: Optional[str] = None,
        *,
        validate: bool = True,
        use_cache: bool = True,
    ) -> Dict[str, Any]:
        """
        Load a configuration file with optional schema validation.

        Args:
            filename: Name or relative path of the config file within config_dir.
            schema_name: JSON schema name to validate against (without extension).
                         If None, inferred from the filename.
            validate: Whether to validate against the schema.
            use_cache: Whether to use cached config if available.

        Returns:
            Parsed configuration as a dictionary.

        Raises:
            ConfigurationError: If the file cannot be loaded or fails validation.
            FileNotFoundError: If the configuration file does not exist.
        """
        file_path = self._resolve_path(filename)
        cache_key = str(file_path.resolve())

        if use_cache and cache_key in self._cache:
            logger.debug(f"Returning cached config for: {filename}")
            return self._cache[cache_key]

        logger.info(f"Loading configuration: {file_path}")
        data = self._read_file(file_path)

        if validate:
            resolved_schema_name = schema_name or self._infer_schema_name(filename)
            if resolved_schema_name:
                self._validate(data, resolved_schema_name)

        if use_cache:
            self._cache[cache_key] = data

        logger.info(f"Configuration loaded successfully: {filename}")
        return data

    def load_log_bridge(self, filename: str = "log_bridge.yaml") -> Dict[str, Any]:
        """
        Load the report bridge configuration file.

        Args:
            filename: Bridge config filename (default: log_bridge.yaml).

        Returns:
            Parsed bridge configuration.
        """
        return self.load(filename, schema_name=LOG_BRIDGE_SCHEMA)

    def clear_cache(self) -> None:
        """Clear all cached configurations."""
        self._cache.clear()
        logger.debug("Configuration cache cleared.")

    def _resolve_path(self, filename: str) -> Path:
        """Resolve a filename to a full path, checking config_dir first."""
        path = Path(filename)
        if path.is_absolute() and path.exists():
            return path

        config_path = self.config_dir / filename
        if config_path.exists():
            return config_path

        if path.exists():
            return path

        raise FileNotFoundError(
            f"Configuration file not found: {filename} "
            f"(searched in {self.config_dir} and current directory)"
        )

    def _read_file(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML or JSON file."""
        suffix = file_path.suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise ConfigurationError(
                f"Unsupported file format '{suffix}'. "
                f"Supported: {self.SUPPORTED_EXTENSIONS}"
            )

        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Failed to read file {file_path}: {e}") from e

        try:
            if suffix in {".yaml", ".yml"}:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to parse {file_path}: {e}") from e

        # An empty YAML document means "all defaults"
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping (dict), "
                f"got {type(data).__name__}: {file_path}"
            )

        return data

    def _validate(self, data: Dict[str, Any], schema_name: str) -> None:
        """Validate configuration data against a JSON schema."""
        try:
            self.schema_registry.validate(data, schema_name)
        except Exception as e:
            raise ConfigurationError(
                f"Configuration validation failed against schema '{schema_name}': {e}"
            ) from e

    @staticmethod
    def _infer_schema_name(filename: str) -> Optional[str]:
        """
        Infer the schema name from the configuration filename.

        Examples:
            log_bridge.yaml -> log_bridge_schema
            log_bridge.example.yaml -> log_bridge_schema
        """
        stem = Path(filename).stem
        if stem.endswith(".example"):
            stem = stem.rsplit(".example", 1)[0]

        schema_map = {
            "log_bridge": LOG_BRIDGE_SCHEMA,
        }
        return schema_map.get(stem)
