"""
Run use case — ``qbit run <script>``.

Loads the project config (required here), looks up ``scripts.<name>``
and hands it to the workflow executor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from src.adapters.base import CommandRunner
from src.core.config.loader import load_project_config
from src.core.context import RuntimeContext
from src.core.engine.executor import run_workflow
from src.core.errors import QbitError, UnknownScript
from src.core.models.command import ExecutionResult

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of running a named script."""

    script: str
    execution: ExecutionResult
    config_path: Path | None = None
    steps: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.execution.ok

    def to_dict(self) -> dict:
        return {
            "script": self.script,
            "config_path": str(self.config_path) if self.config_path else None,
            "steps": self.steps,
            "dry_run": self.execution.dry_run,
            "planned": self.execution.planned,
            "ok": self.ok,
            "exit_status": self.execution.exit_status,
            "failed_step": self.execution.step_number,
            "failed_command": None if self.ok else self.execution.command,
        }


def run_script(
    name: str,
    ctx: RuntimeContext,
    config_path: Path | None = None,
    dry_run: bool = False,
    runner: CommandRunner | None = None,
    on_step: Callable[[int, int, str], None] | None = None,
) -> RunResult:
    """Run ``scripts.<name>`` from the project config.

    Args:
        name: Script name.
        ctx: Runtime context (project root, platform).
        config_path: Explicit config file (``--config``).
        dry_run: Render the steps only.
        runner: Process runner override (tests).
        on_step: Progress callback, see ``run_workflow``.

    Returns:
        RunResult; ``execution.step_index`` is set when a step failed.

    Raises:
        ConfigError: No config, or an invalid one.
        UnknownScript: ``name`` is not under ``scripts``.
        EmptyWorkflow: The script has no commands.
        SpawnError: A step could not be launched.
    """
    try:
        config = load_project_config(ctx.cwd, config_path=config_path, required=True)
        assert config is not None  # guaranteed by required=True

        entry = config.get_script(name)
        if entry is None:
            raise UnknownScript(name, config.source_label, sorted(config.scripts))

        execution = run_workflow(
            entry,
            dry_run=dry_run,
            name=name,
            working_directory=ctx.cwd,
            platform=ctx.platform,
            runner=runner,
            on_step=on_step,
        )
    except QbitError as e:
        e.annotate(script=name)
        raise

    if not execution.ok:
        logger.info(
            "Script '%s' stopped at step %d: %s",
            name,
            execution.step_number,
            execution.command,
        )

    return RunResult(
        script=name,
        execution=execution,
        config_path=config.source,
        steps=entry.commands,
    )
