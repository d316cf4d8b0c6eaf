"""
Unit tests for the command-line interface.
"""

import sys

import pytest

from buildexec.cli.main import (
    EXIT_KILLED,
    EXIT_SPAWN_FAILED,
    EXIT_TERMINATION_FAILED,
    exit_code_for,
    main,
)
from buildexec.models import ProcessOutcome, ProcessResult


def _tool_argv(tool, *tool_args):
    return [sys.executable, str(tool), *tool_args]


@pytest.fixture
def cli_config(temp_dir, tool):
    """A config with fast kill settings and one task running the fake tool."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump(
            {
                "runner": {"default_timeout": 30.0, "kill_timeout": 2.0, "poll_interval": 0.02},
                "logging": {"level": "WARNING"},
                "paths": {"tasks_config": "tasks.toml"},
            },
            f,
        )
    with open(temp_dir / "tasks.toml", "w") as f:
        toml.dump(
            {
                "tasks": [
                    {"name": "greet", "commands": [tool.command("hello"), tool.command("again")]},
                    {"name": "broken", "commands": [tool.command("--exit-code", "3"), tool.command("skipped")]},
                ]
            },
            f,
        )
    return config_file


@pytest.mark.unit
class TestExitCodeMapping:
    """Test cases for exit_code_for."""

    def test_natural_exit(self):
        assert exit_code_for(ProcessResult(3, "", "")) == 3

    def test_signal_exit(self):
        assert exit_code_for(ProcessResult(-15, "", "")) == 143

    def test_killed(self):
        result = ProcessResult(-9, "", "", outcome=ProcessOutcome.KILLED)
        assert exit_code_for(result) == EXIT_KILLED

    def test_termination_failed(self):
        result = ProcessResult(None, "", "", outcome=ProcessOutcome.TERMINATION_FAILED)
        assert exit_code_for(result) == EXIT_TERMINATION_FAILED


@pytest.mark.unit
class TestMain:
    """Test cases for main()."""

    def test_runs_executable_and_echoes_output(self, cli_config, echo_tool, capsys):
        code = main(["-c", str(cli_config), *_tool_argv(echo_tool, "hello", "world", "--stderr", "warn")])

        captured = capsys.readouterr()
        assert code == 0
        assert captured.out == "hello world\n"
        assert "warn" in captured.err

    def test_passes_through_exit_code(self, cli_config, echo_tool, capsys):
        code = main(["-c", str(cli_config), *_tool_argv(echo_tool, "--exit-code", "7")])

        assert code == 7

    def test_environment_and_cwd(self, cli_config, echo_tool, temp_dir, capsys):
        code = main(
            [
                "-c", str(cli_config),
                "-e", "BUILDEXEC_CLI_VAR=set",
                "-C", str(temp_dir),
                *_tool_argv(echo_tool, "--print-env", "BUILDEXEC_CLI_VAR", "--print-cwd"),
            ]
        )

        lines = capsys.readouterr().out.splitlines()
        assert code == 0
        assert lines[0] == "set"
        assert lines[1] == str(temp_dir.resolve())

    def test_timeout_kills(self, cli_config, echo_tool, capsys):
        code = main(["-c", str(cli_config), "-t", "0.5", *_tool_argv(echo_tool, "--sleep", "30")])

        assert code == EXIT_KILLED

    def test_spawn_failure(self, cli_config, temp_dir, capsys):
        code = main(["-c", str(cli_config), str(temp_dir / "no-such-tool")])

        assert code == EXIT_SPAWN_FAILED

    def test_invalid_timeout_exits(self, cli_config, echo_tool):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(cli_config), "-t", "0", *_tool_argv(echo_tool)])

        assert exc_info.value.code == 2

    def test_missing_config_exits(self, temp_dir, echo_tool):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(temp_dir / "missing.toml"), *_tool_argv(echo_tool)])

        assert exc_info.value.code == 2

    def test_missing_executable(self, cli_config):
        with pytest.raises(SystemExit) as exc_info:
            main(["-c", str(cli_config)])

        assert exc_info.value.code == 2


@pytest.mark.unit
class TestTaskMode:
    """Test cases for --task."""

    def test_runs_task(self, cli_config, capsys):
        code = main(["-c", str(cli_config), "--task", "greet"])

        assert code == 0
        assert capsys.readouterr().out == "hello\nagain\n"

    def test_failing_task(self, cli_config, capsys):
        code = main(["-c", str(cli_config), "--task", "broken"])

        assert code == 3
        assert "skipped" not in capsys.readouterr().out

    def test_unknown_task(self, cli_config):
        assert main(["-c", str(cli_config), "--task", "nope"]) == 2
