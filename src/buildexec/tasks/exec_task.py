"""
Command sequence build task.

This module provides ExecTask, a build step that runs a list of commands one
after another through a ProcessRunner and stops at the first command that
does not finish with the expected exit code.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..executor.process_runner import ProcessRunner
from ..models.config import TaskConfig
from ..models.invocation import DEFAULT_TIMEOUT, ProcessInvocation, ProcessResult
from ..system.commands import split_command

logger = logging.getLogger(__name__)


@dataclass
class ExecTaskResult:
    """Results of every command the task ran, in order."""

    results: List[ProcessResult] = field(default_factory=list)
    commands: List[str] = field(default_factory=list)
    succeeded: bool = True
    failed_command: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def last_result(self) -> Optional[ProcessResult]:
        return self.results[-1] if self.results else None


class ExecTask:
    """
    Runs a sequence of commands, stopping at the first failure.

    A command fails when it is killed for exceeding its timeout, or when its
    exit code differs from success_exit_code and ignore_exit_code is off.
    """

    def __init__(
        self,
        commands: List[str],
        working_directory: Optional[Union[str, Path]] = None,
        environment: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        success_exit_code: int = 0,
        ignore_exit_code: bool = False,
        runner: Optional[ProcessRunner] = None,
        name: str = "exec",
    ):
        """
        Initialize the task.

        Args:
            commands: Command strings, "executable arguments" each. Blank
                entries are skipped.
            working_directory: Directory every command runs in
            environment: Variables merged into each command's environment
            timeout: Per-command timeout in seconds, None for no limit
            success_exit_code: Exit code that counts as success
            ignore_exit_code: Keep going regardless of exit codes
            runner: ProcessRunner to use, a default one if omitted
            name: Name used in log messages
        """
        self.commands = [command.strip() for command in commands if command and command.strip()]
        self.working_directory = working_directory
        self.environment = dict(environment or {})
        self.timeout = timeout
        self.success_exit_code = success_exit_code
        self.ignore_exit_code = ignore_exit_code
        self.runner = runner or ProcessRunner()
        self.name = name

    @classmethod
    def from_config(
        cls,
        task_config: TaskConfig,
        runner: Optional[ProcessRunner] = None,
    ) -> "ExecTask":
        """
        Create a task from its configuration entry.

        Args:
            task_config: Validated task configuration; a timeout of None
                means the commands may run without bound
            runner: ProcessRunner to use
        """
        return cls(
            commands=task_config.commands,
            working_directory=task_config.working_directory,
            environment=task_config.environment,
            timeout=task_config.timeout,
            success_exit_code=task_config.success_exit_code,
            ignore_exit_code=task_config.ignore_exit_code,
            runner=runner,
            name=task_config.name,
        )

    def build_invocation(self, command: str) -> ProcessInvocation:
        executable, arguments = split_command(command)
        return ProcessInvocation(
            executable=executable,
            arguments=arguments,
            working_directory=self.working_directory,
            environment_overrides=dict(self.environment),
            timeout=self.timeout,
        )

    def execute(self) -> ExecTaskResult:
        """
        Run every command in order.

        Returns:
            ExecTaskResult describing what ran and whether the task succeeded

        Raises:
            SpawnError: If a command could not be started
        """
        task_result = ExecTaskResult()
        start_time = time.monotonic()

        if not self.commands:
            logger.error(f"Task '{self.name}': no command(s) specified")
            task_result.succeeded = False
            return task_result

        for command in self.commands:
            logger.info(f"Task '{self.name}': executing {command}")
            result = self.runner.execute(self.build_invocation(command))
            task_result.results.append(result)
            task_result.commands.append(command)

            if self._is_failure(result):
                if result.was_killed:
                    logger.error(
                        f"Task '{self.name}': {command} was killed after exceeding {self.timeout}s"
                    )
                else:
                    logger.error(
                        f"Task '{self.name}': {command} failed with exit code: {result.exit_code}"
                    )
                task_result.succeeded = False
                task_result.failed_command = command
                break

        task_result.duration_seconds = time.monotonic() - start_time
        logger.info(
            f"Task '{self.name}' {'succeeded' if task_result.succeeded else 'failed'} "
            f"after {len(task_result.results)} command(s) in {task_result.duration_seconds:.2f}s"
        )
        return task_result

    def _is_failure(self, result: ProcessResult) -> bool:
        if result.was_killed:
            return True
        if self.ignore_exit_code:
            return False
        return result.exit_code != self.success_exit_code
