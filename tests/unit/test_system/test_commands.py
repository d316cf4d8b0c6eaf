"""
Unit tests for command line preparation.
"""

from unittest.mock import patch

import pytest

from buildexec.system import commands
from buildexec.system.commands import build_argv, join_arguments, split_command


@pytest.mark.unit
class TestBuildArgvPosix:
    """Test argv construction with POSIX quoting rules."""

    @pytest.fixture(autouse=True)
    def posix(self):
        with patch.object(commands, "IS_WINDOWS", False):
            yield

    def test_no_arguments(self):
        assert build_argv("make") == ["make"]
        assert build_argv("make", "") == ["make"]

    def test_splits_arguments(self):
        assert build_argv("make", "-j4 all") == ["make", "-j4", "all"]

    def test_quoted_argument_kept_together(self):
        argv = build_argv("git", "log --format='%H %s'")

        assert argv == ["git", "log", "--format=%H %s"]

    def test_shell_metacharacters_are_literal(self):
        argv = build_argv("echo", "a; rm -rf / | cat")

        assert argv == ["echo", "a;", "rm", "-rf", "/", "|", "cat"]

    def test_unbalanced_quote_raises(self):
        with pytest.raises(ValueError):
            build_argv("echo", "'unterminated")

    def test_join_round_trip(self):
        arguments = ["--name", "two words", "it's", ""]

        assert build_argv("tool", join_arguments(arguments)) == ["tool", *arguments]


@pytest.mark.unit
class TestBuildArgvWindows:
    """Test command line construction on Windows."""

    @pytest.fixture(autouse=True)
    def windows(self):
        with patch.object(commands, "IS_WINDOWS", True):
            yield

    def test_argument_string_passed_through(self):
        assert build_argv("msbuild.exe", "/t:Build /p:X=1") == "msbuild.exe /t:Build /p:X=1"

    def test_executable_with_spaces_is_quoted(self):
        line = build_argv(r"C:\Program Files\tool.exe", "/v")

        assert line == r'"C:\Program Files\tool.exe" /v'

    def test_no_arguments(self):
        assert build_argv("cmd.exe") == "cmd.exe"

    def test_join_uses_windows_quoting(self):
        assert join_arguments(["a b", "c"]) == '"a b" c'


@pytest.mark.unit
class TestSplitCommand:
    """Test splitting configured command strings."""

    def test_bare_executable(self):
        assert split_command("make") == ("make", "")

    def test_executable_and_arguments(self):
        assert split_command("make -j4 all") == ("make", "-j4 all")

    def test_quoted_executable(self):
        assert split_command('"C:/Program Files/tool.exe" /v build') == (
            "C:/Program Files/tool.exe",
            "/v build",
        )

    def test_surrounding_whitespace_ignored(self):
        assert split_command("  git status  ") == ("git", "status")

    def test_blank_command_raises(self):
        with pytest.raises(ValueError):
            split_command("   ")
