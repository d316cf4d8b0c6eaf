"""
Command-line interface for the buildexec process runner.

This module runs either a single executable or a named task from the
configuration, echoes the captured output, and exits with the child's exit
code so the CLI can stand in for the tool in scripts.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..executor.process_runner import ProcessRunner
from ..models.invocation import ProcessInvocation, ProcessOutcome, ProcessResult
from ..system.commands import join_arguments
from ..tasks.exec_task import ExecTask
from ..validation import (
    SpawnError,
    ValidationError,
    handle_cli_error,
    parse_environment_assignment,
    validate_optional_timeout,
    validate_path_exists,
    validate_task_name,
)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Exit codes for outcomes that have no exit code of their own.
EXIT_KILLED = 124
EXIT_TERMINATION_FAILED = 125
EXIT_SPAWN_FAILED = 127

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildexec",
        description="Run an external tool with full output capture and a timeout.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config.toml (defaults to conf/config.toml).",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=str,
        help="Seconds before the process is killed, or 'none' to wait forever. "
        "Defaults to runner.default_timeout from config.",
    )
    parser.add_argument(
        "-C",
        "--cwd",
        type=Path,
        help="Working directory for the process.",
    )
    parser.add_argument(
        "-e",
        "--env",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Environment variable for the process. May be repeated.",
    )
    parser.add_argument(
        "--task",
        type=str,
        help="Run a named task from tasks.toml instead of a single executable.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument("executable", nargs="?", help="Program to run.")
    parser.add_argument(
        "arguments",
        nargs=argparse.REMAINDER,
        help="Arguments passed to the program unchanged.",
    )
    return parser


def exit_code_for(result: ProcessResult) -> int:
    """Map a ProcessResult onto a process exit status for this CLI."""
    if result.outcome is ProcessOutcome.KILLED:
        return EXIT_KILLED
    if result.outcome is ProcessOutcome.TERMINATION_FAILED:
        return EXIT_TERMINATION_FAILED
    code = result.exit_code
    # Signal deaths are negative on POSIX; report them the way shells do.
    return 128 - code if code < 0 else code


def _echo(result: ProcessResult) -> None:
    if result.standard_output:
        sys.stdout.write(result.standard_output)
        if not result.standard_output.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()
    if result.standard_error:
        sys.stderr.write(result.standard_error)
        sys.stderr.flush()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, run the requested process or task, and return the exit code.

    Args:
        argv: Argument list, sys.argv[1:] if None

    Returns:
        Exit code for the calling process
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        try:
            validate_path_exists(args.config, field_name="--config")
        except ValidationError as e:
            handle_cli_error(error=e, context="configuration path", exit_code=2, logger=logger)
        set_config_path(args.config)

    try:
        app_config = get_config()
    except Exception as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=2, logger=logger)

    level = logging.DEBUG if args.verbose else getattr(logging, app_config.logging.level)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )

    try:
        timeout = app_config.runner.default_timeout
        if args.timeout is not None:
            timeout = validate_optional_timeout(args.timeout, field_name="--timeout")

        environment = {}
        for assignment in args.env:
            environment.update(parse_environment_assignment(assignment, field_name="--env"))

        working_directory = None
        if args.cwd is not None:
            working_directory = validate_path_exists(args.cwd, field_name="--cwd")
    except ValidationError as e:
        handle_cli_error(error=e, context="argument validation", exit_code=2, logger=logger)

    runner = ProcessRunner.from_config(app_config.runner)

    if args.task:
        return _run_task(args, app_config, runner)

    if not args.executable:
        parser.error("an executable or --task is required")

    invocation = ProcessInvocation(
        executable=args.executable,
        arguments=join_arguments(args.arguments),
        working_directory=working_directory,
        environment_overrides=environment,
        timeout=timeout,
    )
    try:
        result = runner.execute(invocation)
    except SpawnError as e:
        logger.error(f"{e}")
        return EXIT_SPAWN_FAILED

    _echo(result)
    if result.was_killed:
        logger.warning(f"{invocation.describe()} did not finish within {timeout}s")
    return exit_code_for(result)


def _run_task(args: argparse.Namespace, app_config, runner: ProcessRunner) -> int:
    try:
        task_name = validate_task_name(args.task, field_name="--task")
    except ValidationError as e:
        handle_cli_error(error=e, context="task name validation", exit_code=2, logger=logger)

    task_config = app_config.get_task(task_name)
    if task_config is None:
        available = [task.name for task in app_config.tasks]
        logger.error(f"Task '{task_name}' not found in configuration.")
        logger.info(f"Available tasks: {', '.join(available) or '(none)'}")
        return 2

    task = ExecTask.from_config(task_config, runner=runner)
    if args.cwd is not None:
        task.working_directory = args.cwd
    for assignment in args.env:
        task.environment.update(parse_environment_assignment(assignment, field_name="--env"))
    if args.timeout is not None:
        task.timeout = validate_optional_timeout(args.timeout, field_name="--timeout")

    try:
        task_result = task.execute()
    except SpawnError as e:
        logger.error(f"Task '{task_name}': {e}")
        return EXIT_SPAWN_FAILED

    for result in task_result.results:
        _echo(result)

    if task_result.succeeded:
        return 0
    last = task_result.last_result
    if last is None:
        return 1
    code = exit_code_for(last)
    return code if code != 0 else 1


def main_cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
