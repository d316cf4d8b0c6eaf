"""
Unit tests for the invocation and result data models.
"""

import dataclasses

import pytest

from buildexec.models import (
    DEFAULT_TIMEOUT,
    AppConfig,
    LoggingConfig,
    ProcessInvocation,
    ProcessOutcome,
    ProcessResult,
    RunnerConfig,
    TaskConfig,
)


@pytest.mark.unit
class TestProcessInvocation:
    """Test cases for ProcessInvocation."""

    def test_defaults(self):
        invocation = ProcessInvocation("make")

        assert invocation.arguments == ""
        assert invocation.working_directory is None
        assert dict(invocation.environment_overrides) == {}
        assert invocation.timeout == DEFAULT_TIMEOUT

    def test_default_timeout_is_finite(self):
        assert DEFAULT_TIMEOUT is not None
        assert DEFAULT_TIMEOUT > 0

    def test_is_immutable(self):
        invocation = ProcessInvocation("make", "all")

        with pytest.raises(dataclasses.FrozenInstanceError):
            invocation.arguments = "clean"

    def test_describe(self):
        assert ProcessInvocation("make").describe() == "make"
        assert ProcessInvocation("make", "-j4 all").describe() == "make -j4 all"

    def test_environment_defaults_are_not_shared(self):
        first = ProcessInvocation("a")
        second = ProcessInvocation("b")

        assert first.environment_overrides is not second.environment_overrides


@pytest.mark.unit
class TestProcessResult:
    """Test cases for ProcessResult."""

    def test_natural_exit(self):
        result = ProcessResult(exit_code=0, standard_output="ok", standard_error="")

        assert result.outcome is ProcessOutcome.EXITED
        assert result.was_killed is False
        assert result.succeeded()

    def test_non_zero_exit_is_not_success(self):
        result = ProcessResult(exit_code=2, standard_output="", standard_error="boom")

        assert not result.was_killed
        assert not result.succeeded()
        assert result.succeeded(success_exit_code=2)

    def test_killed_result(self):
        result = ProcessResult(
            exit_code=-9,
            standard_output="partial",
            standard_error="",
            outcome=ProcessOutcome.KILLED,
        )

        assert result.was_killed
        assert not result.succeeded(success_exit_code=-9)

    def test_termination_failed_result(self):
        result = ProcessResult(
            exit_code=None,
            standard_output="",
            standard_error="",
            outcome=ProcessOutcome.TERMINATION_FAILED,
        )

        assert result.was_killed
        assert not hasattr(result, "timed_out")
        assert not result.succeeded()


@pytest.mark.unit
class TestAppConfig:
    """Test cases for the configuration models."""

    def test_runner_defaults(self):
        runner = RunnerConfig()

        assert runner.default_timeout == DEFAULT_TIMEOUT
        assert runner.kill_timeout == 10.0
        assert runner.poll_interval == 0.05
        assert runner.encoding == "utf-8"

    def test_get_task(self):
        config = AppConfig(
            runner=RunnerConfig(),
            logging=LoggingConfig(),
            tasks=[TaskConfig(name="build", commands=["make"])],
        )

        assert config.get_task("build").commands == ["make"]
        assert config.get_task("missing") is None
