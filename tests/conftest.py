"""
Pytest configuration and shared fixtures for the buildexec test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the buildexec project.
"""

import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from buildexec.models import ProcessInvocation  # noqa: E402
from buildexec.system import join_arguments  # noqa: E402

ECHO_TOOL = Path(__file__).parent / "fixtures" / "echo_tool.py"


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def echo_tool() -> Path:
    """Path of the fake build tool script."""
    return ECHO_TOOL


class ToolInvocations:
    """Builds invocations of the fake build tool through sys.executable."""

    @staticmethod
    def arguments(*tool_args: str) -> str:
        return join_arguments([str(ECHO_TOOL), *tool_args])

    @classmethod
    def invocation(cls, *tool_args: str, timeout: Optional[float] = 30.0, **kwargs) -> ProcessInvocation:
        return ProcessInvocation(
            executable=sys.executable,
            arguments=cls.arguments(*tool_args),
            timeout=timeout,
            **kwargs,
        )

    @classmethod
    def command(cls, *tool_args: str) -> str:
        """A single "executable arguments" command string."""
        return f'"{sys.executable}" {cls.arguments(*tool_args)}'


@pytest.fixture
def tool():
    """Provide helpers for invoking the fake build tool."""
    return ToolInvocations


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def sample_runner_data():
    """Sample [runner] table for testing."""
    return {
        "default_timeout": 120.0,
        "kill_timeout": 2.0,
        "poll_interval": 0.02,
        "encoding": "utf-8",
    }


@pytest.fixture
def sample_tasks_data():
    """Sample task tables for testing."""
    return [
        {
            "name": "compile",
            "commands": ["gcc -c main.c", "gcc -o app main.o"],
            "working_directory": "/tmp/project",
            "environment": {"CC": "gcc", "OPT_LEVEL": 2},
            "timeout": 300.0,
        },
        {
            "name": "lint",
            "commands": ["ruff check ."],
            "ignore_exit_code": True,
        },
    ]


@pytest.fixture
def config_files(temp_dir, sample_runner_data, sample_tasks_data):
    """Create temporary configuration files for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    config_data = {
        "runner": sample_runner_data,
        "logging": {"level": "debug"},
        "paths": {"tasks_config": "tasks.toml"},
    }
    with open(config_file, "w") as f:
        toml.dump(config_data, f)

    tasks_file = temp_dir / "tasks.toml"
    with open(tasks_file, "w") as f:
        toml.dump({"tasks": sample_tasks_data}, f)

    return {
        "config": config_file,
        "tasks": tasks_file,
        "dir": temp_dir,
    }


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from buildexec.config import clear_config_cache, set_config_path
    from buildexec.config.manager import DEFAULT_CONFIG_FILE_PATH

    set_config_path(DEFAULT_CONFIG_FILE_PATH)
    clear_config_cache()
