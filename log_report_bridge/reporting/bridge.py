"""
Log-to-Report Bridge Module.

Forwards individual log events into the test report as text attachments.
Each event becomes one attachment with a fixed title and a single line of
the form ``[<level>] <source> - <message>``.

The bridge plugs into two logging pipelines:
- loguru: the bridge instance itself is a loguru sink (see `install_bridge`).
- stdlib logging: `ReportLogHandler` wraps the bridge as a logging.Handler.

`LogToReportBridge.handle` never catches anything. Keeping failures away
from the logging call site is left to the host pipeline: loguru's
``catch=True`` and ``logging.Handler.handleError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from log_report_bridge.reporting.sink import TEXT_MEDIA_TYPE, ReportSink

DEFAULT_ATTACHMENT_TITLE = "Log Entry"
DEFAULT_LEVEL = "DEBUG"


@dataclass(frozen=True)
class LogEvent:
    """
    A single log record as seen by the bridge.

    Attributes:
        level: Severity name as reported by the host pipeline.
        source: Originating logger name.
        message: Fully interpolated message text.
    """

    level: str
    source: str
    message: str

    @classmethod
    def from_loguru(cls, record: Any) -> "LogEvent":
        """Build an event from a loguru record dict."""
        return cls(
            level=record["level"].name,
            source=record["name"],
            message=record["message"],
        )

    @classmethod
    def from_logging(cls, record: logging.LogRecord) -> "LogEvent":
        """Build an event from a stdlib LogRecord."""
        return cls(
            level=record.levelname,
            source=record.name,
            message=record.getMessage(),
        )


def format_log_entry(event: LogEvent) -> str:
    """
    Render an event as a single report line.

    Examples:
        LogEvent("INFO", "app.steps", "Opened") -> "[INFO] app.steps - Opened"
        LogEvent("INFO", "", "") -> "[INFO]  - "
    """
    return f"[{event.level}] {event.source} - {event.message}"


class LogToReportBridge:
    """
    Adapts log events into text attachments on a report sink.

    The bridge is bound to its sink at construction and keeps nothing
    between calls, so a single instance may be shared by any number of
    logging threads.

    Example usage::

        sink = AllureReportSink()
        bridge = LogToReportBridge(sink)
        handler_id = logger.add(bridge, level="DEBUG", format="{message}")
    """

    def __init__(
        self,
        sink: ReportSink,
        title: str = DEFAULT_ATTACHMENT_TITLE,
        media_type: str = TEXT_MEDIA_TYPE,
    ) -> None:
        """
        Initialize the bridge.

        Args:
            sink: Report context attachments are forwarded to.
            title: Constant attachment title used for every log entry.
            media_type: MIME type declared for every attachment.
        """
        self.sink = sink
        self.title = title
        self.media_type = media_type

    def handle(self, event: LogEvent) -> None:
        """
        Forward one log event to the sink as one attachment.

        Args:
            event: The log event to forward.

        Raises:
            Whatever text coercion or the sink raises; nothing is caught here.
        """
        self.sink.add_attachment(self.title, format_log_entry(event), self.media_type)

    def __call__(self, message: Any) -> None:
        """loguru sink entry point: `message.record` carries the event fields."""
        self.handle(LogEvent.from_loguru(message.record))

    def __repr__(self) -> str:
        return f"LogToReportBridge(sink={self.sink!r}, title={self.title!r})"


class ReportLogHandler(logging.Handler):
    """
    stdlib logging handler that forwards records through a LogToReportBridge.

    Errors raised while forwarding are routed to `handleError`, which is
    how stdlib handlers keep failures away from the logging call site.
    """

    def __init__(
        self,
        sink: ReportSink,
        title: str = DEFAULT_ATTACHMENT_TITLE,
        media_type: str = TEXT_MEDIA_TYPE,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        self.bridge = LogToReportBridge(sink, title=title, media_type=media_type)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.bridge.handle(LogEvent.from_logging(record))
        except Exception:
            self.handleError(record)


def install_bridge(
    sink: ReportSink,
    level: str | int = DEFAULT_LEVEL,
    title: str = DEFAULT_ATTACHMENT_TITLE,
    media_type: str = TEXT_MEDIA_TYPE,
    filter: Optional[Any] = None,
) -> int:
    """
    Register a LogToReportBridge as a loguru sink.

    Sink errors are caught by loguru (``catch=True``) and reported on
    stderr instead of reaching the code that logged.

    Args:
        sink: Report context to forward into.
        level: Minimum loguru level forwarded.
        title: Attachment title for every log entry.
        media_type: MIME type for every attachment.
        filter: Optional loguru filter (module name, callable or level dict).

    Returns:
        The loguru handler id, for `uninstall_bridge`.
    """
    bridge = LogToReportBridge(sink, title=title, media_type=media_type)
    logger.debug(f"[Bridge] Installing report bridge — level={level}, title={title!r}")
    return logger.add(
        bridge,
        level=level,
        format="{message}",
        filter=filter,
        colorize=False,
        catch=True,
    )


def uninstall_bridge(handler_id: int) -> None:
    """
    Remove a bridge previously registered with `install_bridge`.

    Raises:
        ValueError: If no loguru handler with that id exists.
    """
    logger.remove(handler_id)
    logger.debug(f"[Bridge] Report bridge removed — handler_id={handler_id}")
