"""
Configuration data models.

This module contains the configuration structures for runner defaults,
logging, named command tasks and the aggregated application configuration.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .invocation import DEFAULT_TIMEOUT


@dataclass
class RunnerConfig:
    """
    Runner defaults, loaded from the `[runner]` table of `config.toml`.
    """

    # Seconds to wait for a process before killing it.
    default_timeout: float = DEFAULT_TIMEOUT
    # Upper bound on waiting for a killed process to confirm its exit.
    kill_timeout: float = 10.0
    # Sleep between exit checks after a kill request.
    poll_interval: float = 0.05
    # Text encoding used to decode both output streams.
    encoding: str = "utf-8"


@dataclass
class LoggingConfig:
    """
    Logging settings, loaded from the `[logging]` table of `config.toml`.
    """

    level: str = "INFO"


@dataclass
class TaskConfig:
    """
    A named sequence of commands, loaded from `tasks.toml`.
    """

    # Unique task name used on the command line.
    name: str
    # Each entry is "executable arguments"; quote the executable if it has spaces.
    commands: List[str]
    working_directory: Optional[str] = None
    environment: Dict[str, str] = field(default_factory=dict)
    # Per-command timeout; None waits without bound. Tasks that leave it out
    # get runner.default_timeout when the configuration is loaded.
    timeout: Optional[float] = DEFAULT_TIMEOUT
    success_exit_code: int = 0
    ignore_exit_code: bool = False


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    runner: RunnerConfig
    logging: LoggingConfig
    tasks: List[TaskConfig]

    def get_task(self, name: str) -> Optional[TaskConfig]:
        for task in self.tasks:
            if task.name == name:
                return task
        return None
