"""
Exception types and error handling helpers.

This module defines the errors that cross component boundaries (spawn
failures and validation failures) and the helpers used to log an error
consistently before deciding whether to re-raise it.
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the exception type used for configuration and input checks.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class SpawnError(Exception):
    """
    Exception raised when an external process could not be started.

    The executable was not found, was not executable, or the OS refused to
    create the process (for example a missing working directory). The
    underlying OSError is chained as __cause__.
    """

    def __init__(self, message: str, executable: str,
                 working_directory: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.executable = executable
        self.working_directory = working_directory


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_subprocess_error(error: Exception, command: str, **kwargs) -> None:
    """Handle subprocess-related errors."""
    handle_error(error, f"subprocess command '{command}'", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors by logging and exiting."""
    exit_code = kwargs.pop('exit_code', 1)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
