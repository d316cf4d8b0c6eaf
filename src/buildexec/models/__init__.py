"""
Data models for process execution and configuration.

Invocation Models:
- The immutable description of a process to run
- The structured result of a finished run and its outcome tag

Configuration Models:
- Runner defaults (timeouts, polling, encoding)
- Logging settings
- Named command tasks
"""

# Configuration models
from .config import AppConfig, LoggingConfig, RunnerConfig, TaskConfig

# Invocation models
from .invocation import DEFAULT_TIMEOUT, ProcessInvocation, ProcessOutcome, ProcessResult

__all__ = [
    # Configuration
    "AppConfig",
    "LoggingConfig",
    "RunnerConfig",
    "TaskConfig",
    # Invocation
    "DEFAULT_TIMEOUT",
    "ProcessInvocation",
    "ProcessOutcome",
    "ProcessResult",
]
