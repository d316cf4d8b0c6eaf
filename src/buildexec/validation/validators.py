"""
Simplified validation functions.

This module provides the value checks used when loading configuration and
parsing command-line input.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import ValidationError


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value"
) -> int:
    """
    Validate that a value is an integer within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a number within bounds.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_boolean(value: Any, field_name: str = "value") -> bool:
    """
    Validate that a value is a real boolean.

    Strings such as "false" are rejected rather than converted by truthiness.

    Raises:
        ValidationError: If value is not a bool
    """
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be true or false, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_optional_timeout(value: Any, field_name: str = "timeout") -> Optional[float]:
    """
    Validate a timeout that may be absent.

    None, and the strings "none"/"infinite", mean an unbounded wait. Any
    other value must be a number greater than zero.
    """
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ("none", "infinite"):
        return None
    timeout = validate_positive_float(value, min_value=0.0, field_name=field_name)
    if timeout == 0.0:
        raise ValidationError(
            f"{field_name} must be greater than 0, got {value}",
            field_name=field_name,
            value=value
        )
    return timeout


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """
    Validate that a path exists.

    Args:
        path: Path to validate
        field_name: Name of the field being validated

    Returns:
        Validated path string

    Raises:
        ValidationError: If path doesn't exist
    """
    path_str = str(path)
    if not os.path.exists(path_str):
        raise ValidationError(
            f"{field_name} does not exist: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return path_str


def validate_task_name(
    name: str,
    existing_names: Optional[List[str]] = None,
    field_name: str = "task_name"
) -> str:
    """
    Validate task name format.

    Args:
        name: Task name to validate
        existing_names: Names already taken (for uniqueness check)
        field_name: Name of the field being validated

    Returns:
        Validated task name

    Raises:
        ValidationError: If name is invalid
    """
    if not name or not isinstance(name, str):
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=name
        )

    if not re.match(r'^[a-zA-Z0-9_.-]+$', name):
        raise ValidationError(
            f"{field_name} must contain only alphanumeric characters, dots, underscores, and hyphens: {name}",
            field_name=field_name,
            value=name
        )

    if existing_names and name in existing_names:
        raise ValidationError(
            f"{field_name} must be unique, '{name}' already exists",
            field_name=field_name,
            value=name
        )

    return name


def validate_simple_command(command: str, field_name: str = "command") -> str:
    """
    Validate that a command line is a non-blank string.

    Args:
        command: Command to validate
        field_name: Name of the field being validated

    Returns:
        The command with surrounding whitespace removed

    Raises:
        ValidationError: If command is invalid
    """
    if not isinstance(command, str) or not command.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=command
        )
    return command.strip()


def validate_environment_overrides(
    environment: Any,
    field_name: str = "environment"
) -> Dict[str, str]:
    """
    Validate an environment variable mapping.

    Names must be non-empty and must not contain '='. Values are converted
    to strings, so TOML integers and booleans are accepted.

    Raises:
        ValidationError: If the mapping or any entry is invalid
    """
    if environment is None:
        return {}
    if not isinstance(environment, dict):
        raise ValidationError(
            f"{field_name} must be a table of NAME = value pairs",
            field_name=field_name,
            value=environment
        )

    validated = {}
    for name, value in environment.items():
        if not isinstance(name, str) or not name or "=" in name:
            raise ValidationError(
                f"{field_name} has an invalid variable name: {name!r}",
                field_name=field_name,
                value=name
            )
        if isinstance(value, bool):
            value = "true" if value else "false"
        validated[name] = str(value)
    return validated


def parse_environment_assignment(assignment: str, field_name: str = "environment") -> Dict[str, str]:
    """Parse a single NAME=VALUE string into a one-entry mapping."""
    name, sep, value = assignment.partition("=")
    if not sep or not name:
        raise ValidationError(
            f"{field_name} must be given as NAME=VALUE, got {assignment!r}",
            field_name=field_name,
            value=assignment
        )
    return {name: value}


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Args:
        value: Value to validate
        choices: List of allowed choices
        field_name: Name of the field being validated
        case_sensitive: Whether the comparison should be case-sensitive

    Returns:
        The matching choice, in the case it was declared with

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]
