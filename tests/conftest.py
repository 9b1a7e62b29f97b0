"""
Root conftest.py — Shared Pytest fixtures and configuration.

Provides fixtures for:
- An in-memory report sink standing in for the Allure report.
- A loguru bridge forwarding into that sink for the duration of a test.
- Temporary configuration directories.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from log_report_bridge.reporting.bridge import install_bridge, uninstall_bridge
from log_report_bridge.reporting.sink import RecordingReportSink


# ---------------------------------------------------------------------------
# Report Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def recording_sink() -> RecordingReportSink:
    """Fresh in-memory report sink."""
    return RecordingReportSink()


@pytest.fixture
def log_bridge(
    recording_sink: RecordingReportSink,
) -> Generator[RecordingReportSink, None, None]:
    """
    Forward every loguru record (TRACE and up) into `recording_sink`.

    Yields the sink so tests can inspect what reached the report.
    """
    handler_id = install_bridge(recording_sink, level="TRACE")
    yield recording_sink
    uninstall_bridge(handler_id)


# ---------------------------------------------------------------------------
# Configuration Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory with an empty schemas folder."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "schemas").mkdir()
    return config_dir


def pytest_configure(config: pytest.Config) -> None:
    """Register custom Pytest markers."""
    config.addinivalue_line(
        "markers",
        "functional: End-to-end step scenario tests",
    )
