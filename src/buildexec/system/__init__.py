"""
System interaction utilities for launching external tools.

This module provides:

- Command line construction that never routes through a shell
- Splitting configured command strings into executable and arguments
- Environment table merging with platform-aware name comparison
"""

# Command preparation
from .commands import IS_WINDOWS, build_argv, join_arguments, split_command

# Environment handling
from .environment import merge_environment

__all__ = [
    # Commands
    "IS_WINDOWS",
    "build_argv",
    "join_arguments",
    "split_command",
    # Environment
    "merge_environment",
]
