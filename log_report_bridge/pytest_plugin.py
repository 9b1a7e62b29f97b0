"""
Pytest plugin — forwards loguru output into the Allure report of each test.

Registered through the ``pytest11`` entry point. Provides:
- CLI options --report-logs / --no-report-logs, --report-logs-level,
  --report-logs-config.
- Settings resolved and validated once at configure time; invalid
  settings abort the run as a usage error.
- An autouse fixture that installs the bridge around every test when enabled.

Without --alluredir, Allure drops the attachments, so enabling the bridge
is harmless on plain pytest runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator, Optional

import pytest
from loguru import logger

from log_report_bridge.config.loader import ConfigLoader, ConfigurationError
from log_report_bridge.config.settings import (
    BridgeSettings,
    apply_overrides,
    load_bridge_settings,
)
from log_report_bridge.reporting.bridge import install_bridge, uninstall_bridge
from log_report_bridge.reporting.sink import AllureReportSink

SETTINGS_KEY = pytest.StashKey[BridgeSettings]()


# ---------------------------------------------------------------------------
# CLI Options
# ---------------------------------------------------------------------------


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add CLI options controlling the report bridge."""
    group = parser.getgroup("report-logs", "log entries as report attachments")
    group.addoption(
        "--report-logs",
        action="store_true",
        default=False,
        help="Attach every loguru log line to the Allure report. Default: from config (off)",
    )
    group.addoption(
        "--no-report-logs",
        action="store_true",
        default=False,
        help="Never attach log lines, even if enabled in the config file",
    )
    group.addoption(
        "--report-logs-level",
        default=None,
        help="Minimum level forwarded to the report. Default: from config (DEBUG)",
    )
    group.addoption(
        "--report-logs-config",
        default="config",
        help="Directory containing log_bridge.yaml. Default: config",
    )


def resolve_settings(
    config_dir: str | Path,
    enable: Optional[bool] = None,
    level: Optional[str] = None,
) -> BridgeSettings:
    """
    Merge the bridge config file with command-line overrides.

    Args:
        config_dir: Directory containing log_bridge.yaml.
        enable: Force the bridge on (True) or off (False); None keeps the file value.
        level: Level override (--report-logs-level).

    Returns:
        Effective, validated BridgeSettings.

    Raises:
        ConfigurationError: If the file or the merged overrides are invalid.
    """
    loader = ConfigLoader(config_dir=config_dir)
    settings = load_bridge_settings(loader=loader)
    return apply_overrides(
        settings,
        enabled=enable,
        level=level,
        registry=loader.schema_registry,
    )


def pytest_configure(config: pytest.Config) -> None:
    """Resolve the bridge settings once, rejecting invalid ones up front."""
    force_on = config.getoption("--report-logs")
    force_off = config.getoption("--no-report-logs")
    if force_on and force_off:
        raise pytest.UsageError("--report-logs and --no-report-logs are mutually exclusive")

    enable: Optional[bool] = None
    if force_on:
        enable = True
    elif force_off:
        enable = False

    try:
        settings = resolve_settings(
            config_dir=config.getoption("--report-logs-config"),
            enable=enable,
            level=config.getoption("--report-logs-level"),
        )
    except ConfigurationError as e:
        raise pytest.UsageError(f"Invalid report bridge configuration: {e}") from e

    config.stash[SETTINGS_KEY] = settings
    logger.debug(f"[ReportLogs] Settings: {settings.to_dict()}")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def report_log_settings(request: pytest.FixtureRequest) -> BridgeSettings:
    """Effective report bridge settings for the session."""
    return request.config.stash[SETTINGS_KEY]


@pytest.fixture(autouse=True)
def _report_log_bridge(
    report_log_settings: BridgeSettings,
) -> Generator[Optional[int], None, None]:
    """Install the report bridge for the duration of each test when enabled."""
    if not report_log_settings.enabled:
        yield None
        return

    handler_id = install_bridge(
        AllureReportSink(),
        level=report_log_settings.level,
        title=report_log_settings.attachment_title,
        media_type=report_log_settings.media_type,
    )
    yield handler_id
    uninstall_bridge(handler_id)
