"""
Reporting Module.

Handles forwarding of test activity into the test report:
- Log entries attached to the report as text (loguru sink / stdlib handler).
- Report sinks (Allure, in-memory recording fake).
- Step wrappers for named, reportable units of test action.
"""

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
    AllureReportSink,
    Attachment,
    RecordingReportSink,
    ReportSink,
    StepRecord,
    StepStatus,
    TEXT_MEDIA_TYPE,
)
from log_report_bridge.reporting.steps import with_step

__all__ = [
    "DEFAULT_ATTACHMENT_TITLE",
    "LogEvent",
    "LogToReportBridge",
    "ReportLogHandler",
    "format_log_entry",
    "install_bridge",
    "uninstall_bridge",
    "AllureReportSink",
    "Attachment",
    "RecordingReportSink",
    "ReportSink",
    "StepRecord",
    "StepStatus",
    "TEXT_MEDIA_TYPE",
    "with_step",
]
