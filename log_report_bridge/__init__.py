"""
Log Report Bridge - Core Source Package.

This package contains the core logic for:
- Reporting: Forwarding log events into test-report attachments.
- Steps: Explicit step wrappers recorded into the report context.
- Configuration: Bridge settings loading and schema validation.
- Actions: Example application steps that log as they run.
"""

__version__ = "0.1.0"
