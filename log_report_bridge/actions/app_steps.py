"""
Application Steps Module.

Example step library driven by the functional tests. Every action is a
named report step that logs one line; with the report bridge installed,
that line lands in the report as an attachment under the step.
"""

from __future__ import annotations

from loguru import logger

from log_report_bridge.reporting.sink import ReportSink
from log_report_bridge.reporting.steps import with_step


class AppSteps:
    """
    Steps of the example application scenario.

    Attributes:
        report: Report context the steps are recorded into.
        is_open: Whether the application is currently open.
        is_logged_in: Whether a user session is active.
    """

    def __init__(self, report: ReportSink) -> None:
        self.report = report
        self.is_open = False
        self.is_logged_in = False

    def open_application(self) -> None:
        with_step(self.report, "Открываем приложение", self._open)

    def login(self) -> None:
        with_step(self.report, "Авторизуемся в приложении", self._login)

    def perform_user_actions(self) -> None:
        with_step(self.report, "Выполняем действия пользователя", self._user_actions)

    def logout(self) -> None:
        with_step(self.report, "Выходим из приложения", self._logout)

    def close_application(self) -> None:
        with_step(self.report, "Закрываем приложение", self._close)

    def _open(self) -> None:
        self.is_open = True
        logger.info("Приложение открыто.")

    def _login(self) -> None:
        self.is_logged_in = True
        logger.info("Выполнен вход в приложение.")

    def _user_actions(self) -> None:
        logger.info("Выполняются действия пользователя.")

    def _logout(self) -> None:
        self.is_logged_in = False
        logger.info("Выполнен выход из приложения.")

    def _close(self) -> None:
        self.is_open = False
        logger.info("Приложение закрыто.")
