"""
Engine executor — runs planned commands and script workflows.

Single-threaded and blocking: one command at a time, in order, each
waited on before the next starts.  Workflows are fail-fast with no
rollback: the first non-zero step stops everything after it.

Flow:
    CommandPlan  → execute()       → ExecutionResult | SpawnError | NonZeroExit
    ScriptEntry  → run_workflow()  → ExecutionResult | EmptyWorkflow | SpawnError

Dry-run never touches a runner; it renders what would run and reports
success.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from src.adapters.base import CommandRunner
from src.core.errors import EmptyWorkflow, NonZeroExit, SpawnError
from src.core.models.command import CommandPlan, ExecutionResult
from src.core.models.workflow import ScriptEntry
from src.core.services.package_install.planner import plan_script_step

logger = logging.getLogger(__name__)


def _default_runner() -> CommandRunner:
    from src.adapters.shell.command import SubprocessRunner

    return SubprocessRunner()


def execute(
    plan: CommandPlan,
    dry_run: bool = False,
    runner: CommandRunner | None = None,
) -> ExecutionResult:
    """Execute one planned command.

    Args:
        plan: The command to run.
        dry_run: Render only; never spawn.
        runner: Process runner (default: SubprocessRunner).

    Returns:
        A successful ExecutionResult.

    Raises:
        SpawnError: The executable could not be launched.
        NonZeroExit: The process returned a non-zero status.
    """
    rendered = plan.render()

    if dry_run:
        logger.info("[dry-run] %s", rendered)
        return ExecutionResult.success(command=rendered, dry_run=True, planned=[rendered])

    runner = runner or _default_runner()
    status = runner.run(plan)
    if status != 0:
        logger.info("✗ %s → exit %d", rendered, status)
        raise NonZeroExit(rendered, status)

    logger.info("✓ %s", rendered)
    return ExecutionResult.success(command=rendered, planned=[rendered], steps_run=1)


def run_workflow(
    entry: ScriptEntry,
    dry_run: bool = False,
    *,
    name: str = "script",
    working_directory: Path = Path("."),
    platform: str = "linux",
    runner: CommandRunner | None = None,
    on_step: Callable[[int, int, str], None] | None = None,
) -> ExecutionResult:
    """Run a script's steps in order, stopping at the first failure.

    Args:
        entry: The script (one command or a list of commands).
        dry_run: Render every step; spawn nothing.
        name: Script name, for logs and errors.
        working_directory: Where each step runs.
        platform: Selects the shell (``sh -c`` or ``cmd /C``).
        runner: Process runner (default: SubprocessRunner).
        on_step: Called as ``on_step(index, total, command)`` before each
            step is spawned (progress output lives with the caller).

    Returns:
        Success, or a failure result carrying the 0-based ``step_index``,
        the step's exit status and its command.

    Raises:
        EmptyWorkflow: The script has no steps (checked before any spawn).
        SpawnError: A step could not be launched; ``step_index`` is set.
    """
    commands = entry.commands
    if not commands:
        raise EmptyWorkflow(name)

    plans = [
        plan_script_step(cmd, working_directory=working_directory, platform=platform)
        for cmd in commands
    ]
    rendered = [plan.render() for plan in plans]

    if dry_run:
        for idx, line in enumerate(rendered):
            logger.info("[dry-run] [script:%s] step %d -> %s", name, idx + 1, line)
        return ExecutionResult.success(dry_run=True, planned=rendered)

    runner = runner or _default_runner()
    total = len(plans)

    for idx, (cmd, plan) in enumerate(zip(commands, plans)):
        logger.info("[script:%s] step %d/%d -> %s", name, idx + 1, total, cmd)
        if on_step is not None:
            on_step(idx, total, cmd)
        try:
            execute(plan, runner=runner)
        except NonZeroExit as e:
            logger.info("✗ [script:%s] step %d failed with exit %d", name, idx + 1, e.code)
            return ExecutionResult.failure(
                exit_status=e.code,
                step_index=idx,
                command=cmd,
                planned=rendered,
                steps_run=idx + 1,
            )
        except SpawnError as e:
            e.step_index = idx
            e.command = cmd
            raise

    logger.info("✓ [script:%s] %d step(s) succeeded", name, total)
    return ExecutionResult.success(
        command=commands[-1],
        planned=rendered,
        steps_run=total,
    )
