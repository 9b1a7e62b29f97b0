"""
Step Wrapper Module.

Records a named, reportable step around a single call. The report sink is
passed in explicitly instead of being looked up from the running test.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from log_report_bridge.reporting.sink import ReportSink

T = TypeVar("T")


def with_step(
    sink: ReportSink,
    name: str,
    fn: Callable[..., T],
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Run `fn` inside a step named `name` on `sink`.

    The step is closed when `fn` returns or raises; the sink decides the
    resulting step status. Exceptions are re-raised unchanged.

    Args:
        sink: Report context the step is recorded into.
        name: Human-readable step name.
        fn: Callable to run inside the step.
        *args: Positional arguments for `fn`.
        **kwargs: Keyword arguments for `fn`.

    Returns:
        Whatever `fn` returns.

    Example usage::

        with_step(sink, "Login", app.login, user="admin")
    """
    with sink.step(name):
        return fn(*args, **kwargs)
