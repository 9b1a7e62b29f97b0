"""
Actions Module.

Contains the example application steps exercised by the functional tests.
Each step is recorded into the report and logs one line as it runs.
"""

from log_report_bridge.actions.app_steps import AppSteps

__all__ = ["AppSteps"]
