"""
Process execution for build tasks.

This module provides the ProcessRunner used by every task that shells out to
an external tool, plus a convenience function for one-off calls.
"""

from .process_runner import (
    DEFAULT_KILL_TIMEOUT,
    POLL_INTERVAL,
    ProcessRunner,
    run_process,
)

__all__ = [
    "DEFAULT_KILL_TIMEOUT",
    "POLL_INTERVAL",
    "ProcessRunner",
    "run_process",
]
