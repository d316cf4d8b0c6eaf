"""
Process invocation and result data models.

This module defines the immutable description of one external process call
(ProcessInvocation) and the structured record produced once that call has
finished (ProcessResult), together with the outcome tag that tells a natural
exit apart from a timeout kill.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Union

# Finite by default; pass timeout=None to wait without bound.
DEFAULT_TIMEOUT = 3600.0


class ProcessOutcome(Enum):
    """How an invocation ended."""

    EXITED = "exited"
    KILLED = "killed"
    TERMINATION_FAILED = "termination_failed"


@dataclass(frozen=True)
class ProcessInvocation:
    """
    Description of an external process to run.

    Attributes:
        executable: Path or command name of the program to start.
        arguments: The complete argument string, not yet split into argv.
        working_directory: Directory for the child; None keeps the caller's.
        environment_overrides: Variables merged over the inherited environment.
        timeout: Seconds to wait before the process is killed. None waits forever.
    """

    executable: str
    arguments: str = ""
    working_directory: Optional[Union[str, Path]] = None
    environment_overrides: Mapping[str, str] = field(default_factory=dict)
    timeout: Optional[float] = DEFAULT_TIMEOUT

    def describe(self) -> str:
        """Return a one-line human readable form of the command."""
        if self.arguments:
            return f"{self.executable} {self.arguments}"
        return self.executable


@dataclass(frozen=True)
class ProcessResult:
    """
    Outcome of a completed invocation.

    exit_code is only None when the process was asked to terminate but never
    confirmed its exit (outcome TERMINATION_FAILED).
    """

    exit_code: Optional[int]
    standard_output: str
    standard_error: str
    outcome: ProcessOutcome = ProcessOutcome.EXITED
    pid: Optional[int] = None
    duration_seconds: float = 0.0

    @property
    def was_killed(self) -> bool:
        """True if the runner had to force termination."""
        return self.outcome is not ProcessOutcome.EXITED

    def succeeded(self, success_exit_code: int = 0) -> bool:
        """
        Check whether the tool ran to completion with the expected exit code.

        Args:
            success_exit_code: Exit code that counts as success.

        Returns:
            True for a natural exit with a matching code.
        """
        return (
            self.outcome is ProcessOutcome.EXITED
            and self.exit_code == success_exit_code
        )
