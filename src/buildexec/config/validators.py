"""
Configuration validation utilities.

This module turns raw TOML tables into validated configuration dataclasses.
"""

import logging
from typing import Any, Dict, List

from ..models.config import LoggingConfig, RunnerConfig, TaskConfig
from ..models.invocation import DEFAULT_TIMEOUT
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_environment_overrides,
    validate_optional_timeout,
    validate_positive_float,
    validate_positive_integer,
    validate_simple_command,
    validate_task_name,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def validate_runner_config(runner_data: Dict[str, Any]) -> RunnerConfig:
    """
    Validate and create a RunnerConfig from the raw [runner] table.

    Args:
        runner_data: Raw runner configuration from TOML

    Returns:
        Validated RunnerConfig instance

    Raises:
        ValidationError: If validation fails
    """
    default_timeout = validate_positive_float(
        runner_data.get("default_timeout", DEFAULT_TIMEOUT),
        min_value=0.001,
        field_name="runner.default_timeout",
    )

    kill_timeout = validate_positive_float(
        runner_data.get("kill_timeout", 10.0),
        min_value=0.1,
        max_value=600.0,
        field_name="runner.kill_timeout",
    )

    poll_interval = validate_positive_float(
        runner_data.get("poll_interval", 0.05),
        min_value=0.001,  # 1ms minimum
        max_value=5.0,
        field_name="runner.poll_interval",
    )

    if poll_interval > kill_timeout:
        raise ValidationError(
            f"runner.poll_interval ({poll_interval}) must not exceed runner.kill_timeout ({kill_timeout})",
            field_name="runner.poll_interval",
            value=poll_interval,
        )

    encoding = runner_data.get("encoding", "utf-8")
    try:
        "".encode(encoding)
    except (LookupError, TypeError):
        raise ValidationError(
            f"runner.encoding is not a known text encoding: {encoding}",
            field_name="runner.encoding",
            value=encoding,
        )

    return RunnerConfig(
        default_timeout=default_timeout,
        kill_timeout=kill_timeout,
        poll_interval=poll_interval,
        encoding=encoding,
    )


def validate_logging_config(logging_data: Dict[str, Any]) -> LoggingConfig:
    """
    Validate and create a LoggingConfig from the raw [logging] table.
    """
    level = validate_enum_choice(
        logging_data.get("level", "INFO"),
        choices=LOG_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )
    return LoggingConfig(level=level)


def validate_tasks_config(
    tasks_data: List[Dict[str, Any]],
    default_timeout: float = DEFAULT_TIMEOUT,
) -> List[TaskConfig]:
    """
    Validate the list of task tables from tasks.toml.

    Args:
        tasks_data: Raw task configurations
        default_timeout: Timeout for tasks that do not set one

    Returns:
        List of validated TaskConfig instances

    Raises:
        ValidationError: If any task is invalid
    """
    tasks: List[TaskConfig] = []
    seen_names: List[str] = []

    for index, task_data in enumerate(tasks_data):
        prefix = f"tasks[{index}]"
        if not isinstance(task_data, dict):
            raise ValidationError(
                f"{prefix} must be a table",
                field_name=prefix,
                value=task_data,
            )

        name = validate_task_name(
            task_data.get("name", ""),
            existing_names=seen_names,
            field_name=f"{prefix}.name",
        )
        seen_names.append(name)

        raw_commands = task_data.get("commands")
        if isinstance(raw_commands, str):
            raw_commands = [raw_commands]
        if not isinstance(raw_commands, list) or not raw_commands:
            raise ValidationError(
                f"{prefix}.commands must be a non-empty list of command strings",
                field_name=f"{prefix}.commands",
                value=raw_commands,
            )
        commands = [
            validate_simple_command(command, field_name=f"{prefix}.commands[{i}]")
            for i, command in enumerate(raw_commands)
        ]

        working_directory = task_data.get("working_directory")
        if working_directory is not None and not isinstance(working_directory, str):
            raise ValidationError(
                f"{prefix}.working_directory must be a string",
                field_name=f"{prefix}.working_directory",
                value=working_directory,
            )

        # An explicit "none" stays None.
        timeout = default_timeout
        if "timeout" in task_data:
            timeout = validate_optional_timeout(task_data["timeout"], field_name=f"{prefix}.timeout")

        tasks.append(
            TaskConfig(
                name=name,
                commands=commands,
                working_directory=working_directory,
                environment=validate_environment_overrides(
                    task_data.get("environment"),
                    field_name=f"{prefix}.environment",
                ),
                timeout=timeout,
                success_exit_code=validate_positive_integer(
                    task_data.get("success_exit_code", 0),
                    min_value=-255,
                    field_name=f"{prefix}.success_exit_code",
                ),
                ignore_exit_code=validate_boolean(
                    task_data.get("ignore_exit_code", False),
                    field_name=f"{prefix}.ignore_exit_code",
                ),
            )
        )

    logger.debug(f"Validated {len(tasks)} task(s): {seen_names}")
    return tasks
