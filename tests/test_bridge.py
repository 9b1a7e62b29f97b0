"""
Tests for the Log-to-Report Bridge Module.

Covers:
- format_log_entry: line layout and boundary values.
- LogToReportBridge: one attachment per event, no dedup, error propagation.
- loguru integration: install/uninstall, level filtering, catch=True.
- ReportLogHandler: stdlib logging integration and handleError routing.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, ContextManager, Generator, List

import pytest
from loguru import logger

from log_report_bridge.reporting.bridge import (
    DEFAULT_ATTACHMENT_TITLE,
    LogEvent,
    LogToReportBridge,
    ReportLogHandler,
    format_log_entry,
    install_bridge,
    uninstall_bridge,
)
from log_report_bridge.reporting.sink import (
    TEXT_MEDIA_TYPE,
    RecordingReportSink,
    ReportSink,
)


# ---------------------------------------------------------------------------
# Test Helpers
# ---------------------------------------------------------------------------


class _FailingSink(ReportSink):
    """Sink whose attachment API always raises."""

    def __init__(self) -> None:
        self.calls = 0

    def add_attachment(
        self, title: str, content: str, media_type: str = TEXT_MEDIA_TYPE
    ) -> None:
        self.calls += 1
        raise RuntimeError("no active report context")

    def step(self, name: str) -> ContextManager[Any]:
        raise NotImplementedError


class _Unprintable:
    """Value whose text conversion fails."""

    def __str__(self) -> str:
        raise ValueError("cannot render")


# ---------------------------------------------------------------------------
# format_log_entry Tests
# ---------------------------------------------------------------------------


class TestFormatLogEntry:
    """Tests for the single-line log entry format."""

    def test_basic_format(self) -> None:
        event = LogEvent(level="ERROR", source="app.db", message="Connection lost")
        assert format_log_entry(event) == "[ERROR] app.db - Connection lost"

    def test_empty_source_and_message(self) -> None:
        """Empty fields still produce a well-formed line."""
        event = LogEvent(level="INFO", source="", message="")
        assert format_log_entry(event) == "[INFO]  - "

    def test_non_ascii_message(self) -> None:
        event = LogEvent(level="INFO", source="org.example.Steps", message="Приложение открыто.")
        assert format_log_entry(event) == "[INFO] org.example.Steps - Приложение открыто."

    @pytest.mark.parametrize("level", ["TRACE", "DEBUG", "INFO", "WARN", "ERROR"])
    def test_level_is_bracketed_verbatim(self, level: str) -> None:
        event = LogEvent(level=level, source="src", message="msg")
        assert format_log_entry(event) == f"[{level}] src - msg"

    def test_message_is_not_reinterpolated(self) -> None:
        """Braces and percent signs in the message are kept as-is."""
        event = LogEvent(level="INFO", source="s", message="{x} 100% %s")
        assert format_log_entry(event) == "[INFO] s - {x} 100% %s"

    def test_log_event_is_immutable(self) -> None:
        event = LogEvent(level="INFO", source="s", message="m")
        with pytest.raises(AttributeError):
            event.message = "changed"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# LogToReportBridge Tests
# ---------------------------------------------------------------------------


class TestLogToReportBridge:
    """Tests for the bridge's handle() operation."""

    def test_handle_adds_one_attachment(self, recording_sink: RecordingReportSink) -> None:
        bridge = LogToReportBridge(recording_sink)
        bridge.handle(LogEvent(level="INFO", source="org.example.Steps", message="Приложение открыто."))

        assert len(recording_sink.attachments) == 1
        attachment = recording_sink.attachments[0]
        assert attachment.title == "Log Entry"
        assert attachment.title == DEFAULT_ATTACHMENT_TITLE
        assert attachment.content == "[INFO] org.example.Steps - Приложение открыто."
        assert attachment.media_type == "text/plain"

    def test_no_handle_no_attachment(self, recording_sink: RecordingReportSink) -> None:
        LogToReportBridge(recording_sink)
        assert recording_sink.attachments == []

    def test_duplicate_events_are_not_deduplicated(
        self, recording_sink: RecordingReportSink
    ) -> None:
        bridge = LogToReportBridge(recording_sink)
        event = LogEvent(level="WARN", source="svc", message="retrying")

        bridge.handle(event)
        bridge.handle(event)

        assert recording_sink.contents() == ["[WARN] svc - retrying"] * 2
        assert recording_sink.attachments[0] is not recording_sink.attachments[1]

    def test_custom_title_and_media_type(self, recording_sink: RecordingReportSink) -> None:
        bridge = LogToReportBridge(recording_sink, title="Driver Log", media_type="text/csv")
        bridge.handle(LogEvent(level="DEBUG", source="drv", message="ok"))

        attachment = recording_sink.attachments[0]
        assert attachment.title == "Driver Log"
        assert attachment.media_type == "text/csv"

    def test_non_string_fields_are_coerced(self, recording_sink: RecordingReportSink) -> None:
        bridge = LogToReportBridge(recording_sink)
        bridge.handle(LogEvent(level="INFO", source=42, message=None))  # type: ignore[arg-type]

        assert recording_sink.contents() == ["[INFO] 42 - None"]

    def test_coercion_failure_propagates(self, recording_sink: RecordingReportSink) -> None:
        bridge = LogToReportBridge(recording_sink)
        with pytest.raises(ValueError, match="cannot render"):
            bridge.handle(LogEvent(level="INFO", source="s", message=_Unprintable()))  # type: ignore[arg-type]
        assert recording_sink.attachments == []

    def test_sink_failure_propagates(self) -> None:
        sink = _FailingSink()
        bridge = LogToReportBridge(sink)
        with pytest.raises(RuntimeError, match="no active report context"):
            bridge.handle(LogEvent(level="INFO", source="s", message="m"))
        assert sink.calls == 1

    def test_concurrent_handle(self, recording_sink: RecordingReportSink) -> None:
        """Each thread's events arrive intact, one attachment per event."""
        bridge = LogToReportBridge(recording_sink)
        threads_count, per_thread = 8, 50
        barrier = threading.Barrier(threads_count)

        def worker(n: int) -> None:
            barrier.wait()
            for i in range(per_thread):
                bridge.handle(LogEvent(level="INFO", source=f"t{n}", message=f"event {i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(threads_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        expected = {
            f"[INFO] t{n} - event {i}"
            for n in range(threads_count)
            for i in range(per_thread)
        }
        contents: List[str] = recording_sink.contents()
        assert len(contents) == threads_count * per_thread
        assert set(contents) == expected


# ---------------------------------------------------------------------------
# loguru Integration Tests
# ---------------------------------------------------------------------------


class TestLoguruIntegration:
    """Tests for the bridge registered as a loguru sink."""

    def test_logged_line_reaches_report(self, log_bridge: RecordingReportSink) -> None:
        logger.info("Приложение открыто.")

        assert log_bridge.contents() == [f"[INFO] {__name__} - Приложение открыто."]

    def test_message_is_interpolated(self, log_bridge: RecordingReportSink) -> None:
        logger.debug("User {} logged in from {}", "bob", "10.0.0.1")

        assert log_bridge.contents() == [f"[DEBUG] {__name__} - User bob logged in from 10.0.0.1"]

    def test_loguru_level_names(self, log_bridge: RecordingReportSink) -> None:
        logger.warning("careful")
        logger.error("broken")

        assert log_bridge.contents() == [
            f"[WARNING] {__name__} - careful",
            f"[ERROR] {__name__} - broken",
        ]

    def test_level_threshold(self, recording_sink: RecordingReportSink) -> None:
        handler_id = install_bridge(recording_sink, level="INFO")
        try:
            logger.debug("hidden")
            logger.info("shown")
        finally:
            uninstall_bridge(handler_id)

        assert recording_sink.contents() == [f"[INFO] {__name__} - shown"]

    def test_uninstall_stops_forwarding(self, recording_sink: RecordingReportSink) -> None:
        handler_id = install_bridge(recording_sink, level="TRACE")
        logger.info("before")
        uninstall_bridge(handler_id)
        logger.info("after")

        assert recording_sink.contents() == [f"[INFO] {__name__} - before"]

    def test_uninstall_unknown_handler_raises(self) -> None:
        with pytest.raises(ValueError):
            uninstall_bridge(987654321)

    def test_sink_failure_does_not_reach_caller(self) -> None:
        """loguru catches sink errors, so logging never raises."""
        sink = _FailingSink()
        handler_id = install_bridge(sink, level="TRACE")
        try:
            logger.info("still fine")
        finally:
            uninstall_bridge(handler_id)

        assert sink.calls == 1

    def test_custom_title(self, recording_sink: RecordingReportSink) -> None:
        handler_id = install_bridge(recording_sink, level="TRACE", title="Run Log")
        try:
            logger.info("x")
        finally:
            uninstall_bridge(handler_id)

        assert recording_sink.contents(title="Run Log") == [f"[INFO] {__name__} - x"]


# ---------------------------------------------------------------------------
# ReportLogHandler Tests
# ---------------------------------------------------------------------------


class TestReportLogHandler:
    """Tests for the stdlib logging adapter."""

    @pytest.fixture
    def std_logger(self) -> Generator[logging.Logger, None, None]:
        log = logging.getLogger("log_report_bridge.tests.stdlib")
        log.setLevel(logging.DEBUG)
        log.propagate = False
        yield log
        for handler in list(log.handlers):
            log.removeHandler(handler)

    def test_record_reaches_report(
        self, std_logger: logging.Logger, recording_sink: RecordingReportSink
    ) -> None:
        std_logger.addHandler(ReportLogHandler(recording_sink))
        std_logger.info("Processed %d items", 3)

        assert recording_sink.contents() == [
            "[INFO] log_report_bridge.tests.stdlib - Processed 3 items"
        ]

    def test_stdlib_level_names(
        self, std_logger: logging.Logger, recording_sink: RecordingReportSink
    ) -> None:
        std_logger.addHandler(ReportLogHandler(recording_sink))
        std_logger.warning("w")

        assert recording_sink.contents() == ["[WARNING] log_report_bridge.tests.stdlib - w"]

    def test_handler_level(
        self, std_logger: logging.Logger, recording_sink: RecordingReportSink
    ) -> None:
        std_logger.addHandler(ReportLogHandler(recording_sink, level=logging.ERROR))
        std_logger.info("skip")
        std_logger.error("keep")

        assert recording_sink.contents() == ["[ERROR] log_report_bridge.tests.stdlib - keep"]

    def test_sink_failure_goes_to_handle_error(
        self, std_logger: logging.Logger, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        handler = ReportLogHandler(_FailingSink())
        failed: List[logging.LogRecord] = []
        monkeypatch.setattr(handler, "handleError", failed.append)
        std_logger.addHandler(handler)

        std_logger.info("boom")

        assert len(failed) == 1
        assert failed[0].getMessage() == "boom"
