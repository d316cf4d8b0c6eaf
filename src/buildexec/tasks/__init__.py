"""
Build tasks that delegate to the process runner.
"""

from .exec_task import ExecTask, ExecTaskResult

__all__ = [
    "ExecTask",
    "ExecTaskResult",
]
