"""
Runner base — the protocol contract between the executor and processes.

The executor only talks to processes through this interface, never by
calling subprocess directly, so tests can swap in MockRunner and dry-run
never needs a runner at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.core.models.command import CommandPlan


class CommandRunner(ABC):
    """Abstract base class for process runners.

    To create a new runner:
        1. Subclass CommandRunner
        2. Implement name and run
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'subprocess', 'mock')."""

    @abstractmethod
    def run(self, plan: CommandPlan) -> int:
        """Run the plan to completion and return its exit status.

        Raises:
            SpawnError: The executable could not be launched.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
