"""
buildexec: safe external process execution for build tasks.

This package runs compilers, database clients, version-control binaries and
other command-line tools on behalf of build steps, capturing their complete
output without pipe deadlocks, enforcing a timeout, and reporting a
structured result.

The package is organized into specialized modules:
- models: Invocation, result and configuration data structures
- executor: The process runner
- system: Command line and environment construction
- validation: Exceptions, error handling and input validation
- config: Configuration loading and validation
- tasks: Build tasks built on the runner
- cli: Command-line interface

Usage:
    From command line:
        buildexec --timeout 30 git rev-parse HEAD

    Programmatically:
        from buildexec import ProcessInvocation, ProcessRunner
        result = ProcessRunner().execute(ProcessInvocation("git", "rev-parse HEAD"))
"""

# Main interfaces
from .config import get_config, clear_config_cache, set_config_path
from .executor import ProcessRunner, run_process
from .tasks import ExecTask, ExecTaskResult
from .cli import main_cli

# Model classes for external use
from .models import (
    AppConfig,
    DEFAULT_TIMEOUT,
    LoggingConfig,
    ProcessInvocation,
    ProcessOutcome,
    ProcessResult,
    RunnerConfig,
    TaskConfig,
)

# Errors
from .validation import SpawnError, ValidationError

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "ProcessRunner",
    "run_process",
    "ExecTask",
    "ExecTaskResult",
    "main_cli",
    # Models
    "AppConfig",
    "DEFAULT_TIMEOUT",
    "LoggingConfig",
    "ProcessInvocation",
    "ProcessOutcome",
    "ProcessResult",
    "RunnerConfig",
    "TaskConfig",
    # Errors
    "SpawnError",
    "ValidationError",
]
