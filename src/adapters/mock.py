"""
Mock runner — test double for process execution.

Records every plan it receives and answers with exit code 0 unless told
otherwise.  Responses are keyed by the rendered command line.
"""

from __future__ import annotations

from src.adapters.base import CommandRunner
from src.core.errors import SpawnError
from src.core.models.command import CommandPlan


class MockRunner(CommandRunner):
    """Universal mock runner for testing."""

    def __init__(self, runner_name: str = "mock", default_status: int = 0):
        self._name = runner_name
        self._default_status = default_status
        self._statuses: dict[str, int] = {}
        self._spawn_errors: dict[str, str] = {}
        self._call_log: list[CommandPlan] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[CommandPlan]:
        """All plans this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def rendered_calls(self) -> list[str]:
        return [plan.render() for plan in self._call_log]

    def set_status(self, command: str, status: int) -> None:
        """Return ``status`` for a plan whose argv contains ``command``."""
        self._statuses[command] = status

    def set_spawn_error(self, command: str, reason: str = "not found") -> None:
        """Raise SpawnError for a plan whose argv contains ``command``."""
        self._spawn_errors[command] = reason

    def reset(self) -> None:
        self._call_log.clear()

    def run(self, plan: CommandPlan) -> int:
        self._call_log.append(plan)
        for key, reason in self._spawn_errors.items():
            if key in plan.argv:
                raise SpawnError(plan.render(), reason)
        for key, status in self._statuses.items():
            if key in plan.argv:
                return status
        return self._default_status
