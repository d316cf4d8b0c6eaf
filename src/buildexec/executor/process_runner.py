"""
Process runner for external build tools.

This module launches one external executable per call, captures its complete
standard output and standard error, enforces a timeout by killing a process
that does not finish in time, and reports a structured result.

Pipe handling:
- Standard output is drained line by line on a background reader thread
  that is created before the blocking work on the caller's thread begins.
- Standard error is read to end-of-stream on the caller's thread.
- Only then does the caller wait for the process to exit.

Reading both pipes sequentially on one thread can stall forever: the child
blocks writing to a full pipe that nobody is reading while the parent blocks
on the other. Draining stdout concurrently keeps that from happening.

Termination:
- A watchdog timer armed at start kills the process when the timeout passes,
  which also unblocks the stderr read of a child that never closes it.
- After a kill request the runner polls for exit at a short fixed interval,
  bounded by kill_timeout; a process that never confirms its exit yields the
  TERMINATION_FAILED outcome instead of hanging the caller.
"""

import logging
import os
import subprocess
import threading
import time
from dataclasses import dataclass, field
from typing import IO, Any, Callable, Dict, List, Optional

import psutil

from ..models.config import RunnerConfig
from ..models.invocation import ProcessInvocation, ProcessOutcome, ProcessResult
from ..system.commands import IS_WINDOWS, build_argv
from ..system.environment import merge_environment
from ..validation import ErrorSeverity, SpawnError, handle_subprocess_error

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05  # seconds between exit checks after a kill request
DEFAULT_KILL_TIMEOUT = 10.0  # seconds to wait for a killed process to exit


class _OutputAccumulator:
    """Collects the stdout lines of exactly one invocation."""

    def __init__(self, separator: str = os.linesep):
        self._separator = separator
        self._parts: List[str] = []

    def on_line(self, line: str) -> None:
        if self._parts:
            self._parts.append(self._separator)
        self._parts.append(line)

    def text(self) -> str:
        return "".join(self._parts)


@dataclass
class _ExecutionContext:
    """State owned by a single execute() call and never shared."""

    invocation: ProcessInvocation
    accumulator: _OutputAccumulator
    process: Optional[subprocess.Popen] = None
    handle: Optional[psutil.Process] = None
    reader: Optional[threading.Thread] = None
    watchdog: Optional[threading.Timer] = None
    started_at: float = 0.0
    kill_requested: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock)


class ProcessRunner:
    """
    Runs external executables with full output capture and a timeout.

    A runner holds only immutable settings, so one instance may be shared by
    any number of threads; every execute() call builds its own context.

    Example:
        runner = ProcessRunner()
        result = runner.execute(ProcessInvocation("git", "rev-parse HEAD", timeout=30))
        if result.succeeded():
            print(result.standard_output)
    """

    def __init__(
        self,
        kill_timeout: float = DEFAULT_KILL_TIMEOUT,
        poll_interval: float = POLL_INTERVAL,
        encoding: str = "utf-8",
    ):
        """
        Initialize the runner.

        Args:
            kill_timeout: Seconds to wait for a killed process to confirm exit
            poll_interval: Seconds between exit checks after a kill request
            encoding: Text encoding of the child's output streams
        """
        self.kill_timeout = kill_timeout
        self.poll_interval = poll_interval
        self.encoding = encoding

    @classmethod
    def from_config(cls, config: RunnerConfig) -> "ProcessRunner":
        return cls(
            kill_timeout=config.kill_timeout,
            poll_interval=config.poll_interval,
            encoding=config.encoding,
        )

    def execute(self, invocation: ProcessInvocation) -> ProcessResult:
        """
        Run the invocation to completion and collect its result.

        A non-zero exit code and a timeout kill are both normal results;
        inspect ProcessResult.outcome and exit_code to tell them apart.

        Args:
            invocation: What to run and how

        Returns:
            The result of the finished process

        Raises:
            SpawnError: If the process could not be started
        """
        context = _ExecutionContext(
            invocation=invocation,
            accumulator=_OutputAccumulator(),
        )
        args = self._build_args(invocation)
        kwargs = self._build_popen_kwargs(invocation)

        try:
            context.process = subprocess.Popen(args, **kwargs)
        except OSError as e:
            handle_subprocess_error(
                error=e,
                command=invocation.describe(),
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=logger,
            )
            raise SpawnError(
                f"Failed to start '{invocation.executable}': {e.strerror or e}",
                executable=invocation.executable,
                working_directory=invocation.working_directory,
            ) from e

        process = context.process
        context.started_at = time.monotonic()
        logger.debug(
            f"Started subprocess pid={process.pid} "
            f"executable={invocation.executable} cwd={invocation.working_directory or os.getcwd()}"
        )

        try:
            context.handle = psutil.Process(process.pid)
        except psutil.NoSuchProcess:
            # Exited before we could look at it; Popen still holds the exit status.
            context.handle = None

        try:
            context.reader = threading.Thread(
                target=self._pump_lines,
                args=(process.stdout, context.accumulator.on_line),
                name=f"buildexec-stdout-{process.pid}",
                daemon=True,
            )
            context.reader.start()
            self._arm_watchdog(context)

            standard_error = process.stderr.read()

            self._wait_for_exit(context)
            if process.returncode is None:
                self._confirm_exit(context)
        except BaseException:
            # Never leave the child running behind an interrupted caller.
            self._request_kill(context, "caller interrupted")
            self._confirm_exit(context)
            raise
        finally:
            if context.watchdog is not None:
                context.watchdog.cancel()
            self._release(context)

        return self._build_result(context, standard_error)

    # ------------------------------------------------------------------
    # Launch parameters
    # ------------------------------------------------------------------

    def _build_args(self, invocation: ProcessInvocation) -> Any:
        try:
            return build_argv(invocation.executable, invocation.arguments)
        except ValueError as e:
            raise SpawnError(
                f"Invalid argument string for '{invocation.executable}': {e}",
                executable=invocation.executable,
                working_directory=invocation.working_directory,
            ) from e

    def _build_popen_kwargs(self, invocation: ProcessInvocation) -> Dict[str, Any]:
        """
        Build subprocess.Popen keyword arguments for an invocation.

        Args:
            invocation: The invocation being prepared

        Returns:
            Dict of kwargs for subprocess.Popen
        """
        kwargs: Dict[str, Any] = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.PIPE,
            "stderr": subprocess.PIPE,
            "shell": False,
            "text": True,
            "encoding": self.encoding,
            "errors": "replace",
        }

        if invocation.working_directory is not None:
            kwargs["cwd"] = os.fspath(invocation.working_directory)

        if invocation.environment_overrides:
            kwargs["env"] = merge_environment(invocation.environment_overrides)

        if IS_WINDOWS:
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

        return kwargs

    # ------------------------------------------------------------------
    # Stream handling
    # ------------------------------------------------------------------

    @staticmethod
    def _pump_lines(stream: IO[str], on_line: Callable[[str], None]) -> None:
        """Feed each line of a stream to on_line until end-of-stream."""
        try:
            for line in stream:
                on_line(line[:-1] if line.endswith("\n") else line)
        except (ValueError, OSError) as e:
            # The pipe was closed underneath us during release.
            logger.debug(f"Stopped reading stdout: {e}")

    # ------------------------------------------------------------------
    # Waiting and termination
    # ------------------------------------------------------------------

    def _arm_watchdog(self, context: _ExecutionContext) -> None:
        timeout = context.invocation.timeout
        if timeout is None:
            return
        context.watchdog = threading.Timer(
            timeout, self._request_kill, args=(context, f"timed out after {timeout}s")
        )
        context.watchdog.daemon = True
        context.watchdog.start()

    def _wait_for_exit(self, context: _ExecutionContext) -> None:
        timeout = context.invocation.timeout
        remaining = None
        if timeout is not None:
            remaining = max(0.0, context.started_at + timeout - time.monotonic())
        try:
            context.process.wait(timeout=remaining)
        except subprocess.TimeoutExpired:
            self._request_kill(context, f"timed out after {timeout}s")

    def _request_kill(self, context: _ExecutionContext, reason: str) -> None:
        """Kill the process once; later requests are ignored."""
        process = context.process
        with context.lock:
            # poll() reaps a child that exited but has not been waited on yet.
            if context.kill_requested or process.poll() is not None:
                return
            context.kill_requested = True

        logger.warning(
            f"Killing subprocess pid={process.pid} ({reason}): {context.invocation.describe()}"
        )
        try:
            if context.handle is not None:
                # psutil refuses to signal a recycled pid.
                context.handle.kill()
            else:
                process.kill()
        except psutil.NoSuchProcess:
            logger.debug(f"Subprocess already exited pid={process.pid}")
        except (psutil.AccessDenied, OSError) as e:
            handle_subprocess_error(
                error=e,
                command=context.invocation.describe(),
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )

    def _confirm_exit(self, context: _ExecutionContext) -> bool:
        """
        Poll until the OS reports the process has exited.

        Returns:
            True if exit was confirmed within kill_timeout
        """
        process = context.process
        deadline = time.monotonic() + self.kill_timeout
        while process.poll() is None:
            if time.monotonic() >= deadline:
                logger.warning(
                    f"Subprocess did not exit after kill pid={process.pid} "
                    f"within {self.kill_timeout}s"
                )
                return False
            time.sleep(self.poll_interval)
        return True

    # ------------------------------------------------------------------
    # Cleanup and result
    # ------------------------------------------------------------------

    def _release(self, context: _ExecutionContext) -> None:
        process = context.process
        streams = [process.stdout, process.stderr]
        if context.reader is not None:
            context.reader.join(timeout=self.kill_timeout)
            if context.reader.is_alive():
                logger.warning(
                    f"stdout of pid={process.pid} still open after exit; "
                    f"output may be incomplete"
                )
                # Closing would block on the reader's buffer lock.
                streams = [process.stderr]
        for stream in streams:
            if stream is None:
                continue
            try:
                stream.close()
            except OSError as e:
                logger.debug(f"Error closing pipe of pid={process.pid}: {e}")

    def _build_result(self, context: _ExecutionContext, standard_error: str) -> ProcessResult:
        process = context.process
        exit_code = process.returncode

        if exit_code is None:
            outcome = ProcessOutcome.TERMINATION_FAILED
        elif context.kill_requested:
            outcome = ProcessOutcome.KILLED
        else:
            outcome = ProcessOutcome.EXITED

        duration = time.monotonic() - context.started_at
        logger.debug(
            f"Subprocess completed pid={process.pid} returncode={exit_code} "
            f"outcome={outcome.value} duration={duration:.3f}s"
        )

        return ProcessResult(
            exit_code=exit_code,
            standard_output=context.accumulator.text(),
            standard_error=standard_error,
            outcome=outcome,
            pid=process.pid,
            duration_seconds=duration,
        )


def run_process(
    invocation: ProcessInvocation,
    runner: Optional[ProcessRunner] = None,
) -> ProcessResult:
    """
    Run a single invocation with a default runner.

    Args:
        invocation: What to run
        runner: Runner to use, a default ProcessRunner if omitted

    Returns:
        The result of the finished process
    """
    return (runner or ProcessRunner()).execute(invocation)
