"""
CommandPlan and ExecutionResult — the execution contract.

The planner produces CommandPlans; the executor consumes each one exactly
once (or renders it in dry-run mode) and answers with an ExecutionResult.
A plan is never mutated after creation.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Arguments made only of these characters are shown unquoted
_SAFE_ARG = re.compile(r"^[A-Za-z0-9_\-./:@=]+$")


def quote_for_display(arg: str) -> str:
    """Quote one argument for human-readable output (not for a shell)."""
    if not arg:
        return '""'
    if _SAFE_ARG.match(arg):
        return arg
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class CommandPlan(BaseModel):
    """A fully planned process invocation."""

    model_config = ConfigDict(frozen=True)

    executable: str
    arguments: tuple[str, ...] = ()
    working_directory: Path = Path(".")

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.arguments]

    def render(self) -> str:
        return " ".join(quote_for_display(part) for part in self.argv)

    def __str__(self) -> str:
        return self.render()


class ExecutionResult(BaseModel):
    """Outcome of one command or one workflow.

    A workflow either succeeds as a whole (``exit_status == 0`` and
    ``step_index is None``) or stops at exactly one failing step.
    """

    exit_status: int = 0
    step_index: int | None = None       # 0-based failing step, workflows only
    command: str | None = None          # rendered failing (or last) command
    dry_run: bool = False
    planned: list[str] = Field(default_factory=list)
    steps_run: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    @property
    def step_number(self) -> int | None:
        """1-based failing step, for messages."""
        return None if self.step_index is None else self.step_index + 1

    @classmethod
    def success(cls, **kwargs) -> ExecutionResult:
        return cls(exit_status=0, **kwargs)

    @classmethod
    def failure(
        cls,
        exit_status: int,
        step_index: int | None = None,
        command: str | None = None,
        **kwargs,
    ) -> ExecutionResult:
        return cls(
            exit_status=exit_status,
            step_index=step_index,
            command=command,
            **kwargs,
        )
