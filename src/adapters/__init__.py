"""Adapters — process runners used by the executor.

Public re-exports for convenient access.
"""

from src.adapters.base import CommandRunner
from src.adapters.mock import MockRunner
from src.adapters.shell.command import SubprocessRunner

__all__ = [
    "CommandRunner",
    "MockRunner",
    "SubprocessRunner",
]
