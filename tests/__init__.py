"""
Log Report Bridge - Test Suite Package.

Contains Pytest-based test suites:
- Unit tests for the bridge, sinks, steps and configuration (this directory).
- functional/: The end-to-end application step scenario.
"""
