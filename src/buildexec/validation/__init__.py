"""
Validation and error handling for the buildexec package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

# Core exception classes and error handling
from .exceptions import (
    ErrorSeverity,
    SpawnError,
    ValidationError,
    handle_error,
    handle_config_error,
    handle_subprocess_error,
    handle_cli_error,
)

# Validation functions
from .validators import (
    parse_environment_assignment,
    validate_boolean,
    validate_enum_choice,
    validate_environment_overrides,
    validate_optional_timeout,
    validate_path_exists,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
    validate_task_name,
)

__all__ = [
    # Core functionality
    "ErrorSeverity",
    "SpawnError",
    "ValidationError",
    "handle_error",
    "handle_config_error",
    "handle_subprocess_error",
    "handle_cli_error",
    # Validators
    "parse_environment_assignment",
    "validate_boolean",
    "validate_enum_choice",
    "validate_environment_overrides",
    "validate_optional_timeout",
    "validate_path_exists",
    "validate_positive_float",
    "validate_positive_integer",
    "validate_simple_command",
    "validate_task_name",
]
