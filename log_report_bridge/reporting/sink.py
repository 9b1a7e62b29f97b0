"""
Report Sink Module.

Defines the report-context interface that log entries and steps are
recorded into, plus two implementations:
- AllureReportSink: writes into the Allure test result of the running test.
- RecordingReportSink: in-memory fake used for verification and simulation.

The sink is always passed explicitly to whatever writes into it, so tests
can substitute the recording fake for the real report.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, ContextManager, Iterator, List, Optional

import allure

TEXT_MEDIA_TYPE = "text/plain"


class StepStatus(Enum):
    """Outcome of a reported step (Allure status names)."""

    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    BROKEN = "broken"


@dataclass(frozen=True)
class Attachment:
    """
    A named blob of text attached to the report.

    Attributes:
        title: Attachment name shown in the report.
        content: Attachment body.
        media_type: MIME type of the body.
        step: Name of the innermost open step when attached, if any.
    """

    title: str
    content: str
    media_type: str = TEXT_MEDIA_TYPE
    step: Optional[str] = None


@dataclass
class StepRecord:
    """A step entered on a RecordingReportSink."""

    name: str
    status: StepStatus = StepStatus.RUNNING
    thread: str = ""


class ReportSink(ABC):
    """
    Abstract report context.

    Subclasses must implement `add_attachment` and `step`.
    """

    @abstractmethod
    def add_attachment(
        self, title: str, content: str, media_type: str = TEXT_MEDIA_TYPE
    ) -> None:
        """
        Attach text content to the current test report.

        Args:
            title: Attachment name.
            content: Attachment body.
            media_type: MIME type of the body.
        """
        ...

    @abstractmethod
    def step(self, name: str) -> ContextManager[Any]:
        """
        Open a named step for the duration of a `with` block.

        Args:
            name: Human-readable step name.
        """
        ...


class AllureReportSink(ReportSink):
    """
    Report sink backed by the Allure runtime API.

    When no Allure listener is active (pytest ran without --alluredir),
    attachments and steps are silently dropped by Allure itself.
    """

    def add_attachment(
        self, title: str, content: str, media_type: str = TEXT_MEDIA_TYPE
    ) -> None:
        allure.attach(
            content,
            name=title,
            attachment_type=self._attachment_type(media_type),
        )

    def step(self, name: str) -> ContextManager[Any]:
        return allure.step(name)

    @staticmethod
    def _attachment_type(media_type: str) -> Any:
        """Map a MIME type to Allure's AttachmentType, or pass it through."""
        for attachment_type in allure.attachment_type:
            if attachment_type.mime_type == media_type:
                return attachment_type
        return media_type


class RecordingReportSink(ReportSink):
    """
    In-memory report sink.

    Records every attachment and step in call order. Safe for concurrent
    use: the shared lists are guarded by a lock, and the stack of open
    steps is kept per thread.

    Attributes:
        attachments: Attachments in the order they were added.
        steps: Steps in the order they were entered.
    """

    def __init__(self) -> None:
        self.attachments: List[Attachment] = []
        self.steps: List[StepRecord] = []
        self._lock = threading.Lock()
        self._local = threading.local()

    def add_attachment(
        self, title: str, content: str, media_type: str = TEXT_MEDIA_TYPE
    ) -> None:
        stack = self._open_steps()
        attachment = Attachment(
            title=title,
            content=content,
            media_type=media_type,
            step=stack[-1] if stack else None,
        )
        with self._lock:
            self.attachments.append(attachment)

    @contextmanager
    def step(self, name: str) -> Iterator[StepRecord]:
        record = StepRecord(name=name, thread=threading.current_thread().name)
        with self._lock:
            self.steps.append(record)

        stack = self._open_steps()
        stack.append(name)
        try:
            yield record
        except AssertionError:
            record.status = StepStatus.FAILED
            raise
        except Exception:
            record.status = StepStatus.BROKEN
            raise
        else:
            record.status = StepStatus.PASSED
        finally:
            stack.pop()

    def contents(self, title: Optional[str] = None) -> List[str]:
        """Return attachment bodies, optionally only those with a given title."""
        with self._lock:
            return [
                a.content
                for a in self.attachments
                if title is None or a.title == title
            ]

    def clear(self) -> None:
        """Drop everything recorded so far."""
        with self._lock:
            self.attachments.clear()
            self.steps.clear()

    def _open_steps(self) -> List[str]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack
