"""
Command line preparation utilities.

This module turns the executable + argument string pair that build tasks
work with into the form the OS process creation call expects, and splits
configured command strings back into that pair.
"""

import logging
import re
import shlex
import subprocess
import sys
from typing import List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

# A leading double-quoted path, or everything up to the first space.
_COMMAND_PATTERN = re.compile(r'^\s*(?:"(?P<quoted>[^"]+)"|(?P<bare>\S+))(?P<arguments>.*)$', re.DOTALL)


def build_argv(executable: str, arguments: str = "") -> Union[List[str], str]:
    """Build the args value for subprocess.Popen without involving a shell.

    On Windows the argument string is already a command line in the native
    format, so it is passed through untouched after the quoted executable.
    On POSIX the string is split with POSIX quoting rules into argv.

    Args:
        executable: Program path or command name.
        arguments: The complete argument string.

    Returns:
        A command line string on Windows, an argv list elsewhere.

    Raises:
        ValueError: If the argument string has unbalanced quotes (POSIX).

    Examples:
        >>> build_argv("git", "log --format='%H %s'")
        ['git', 'log', '--format=%H %s']
    """
    if IS_WINDOWS:
        command_line = subprocess.list2cmdline([executable])
        if arguments:
            command_line = f"{command_line} {arguments}"
        return command_line

    argv = [executable]
    if arguments:
        argv.extend(shlex.split(arguments))
    return argv


def join_arguments(arguments: Sequence[str]) -> str:
    """Quote a list of separate arguments into one argument string.

    The inverse of the splitting done by build_argv, so a list taken from
    a command line reaches the child unchanged.
    """
    if IS_WINDOWS:
        return subprocess.list2cmdline(list(arguments))
    return shlex.join(arguments)


def split_command(command: str) -> Tuple[str, str]:
    """Split a configured command string into (executable, arguments).

    The executable may be wrapped in double quotes when its path contains
    spaces; everything after it is returned as the argument string.

    Examples:
        >>> split_command('"C:/Program Files/tool.exe" /v build')
        ('C:/Program Files/tool.exe', '/v build')
        >>> split_command("make")
        ('make', '')
    """
    match = _COMMAND_PATTERN.match(command)
    if not match:
        raise ValueError(f"Cannot parse command: {command!r}")
    executable = match.group("quoted") or match.group("bare")
    arguments = match.group("arguments").strip()
    logger.debug(f"Split command '{command}' -> executable='{executable}' arguments='{arguments}'")
    return executable, arguments
