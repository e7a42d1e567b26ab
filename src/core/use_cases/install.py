"""
Install use case — ``qbit install <name[:version]>``.

The full vertical slice: parse the request, load the (optional) project
config, detect the package manager, resolve the identifier, plan the
command and execute (or dry-run) it.  Every step raises its own typed
error; nothing here prints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from src.adapters.base import CommandRunner
from src.core.config.loader import load_project_config
from src.core.context import RuntimeContext
from src.core.engine.executor import execute
from src.core.errors import ExecError, QbitError
from src.core.models.command import CommandPlan, ExecutionResult
from src.core.models.package_manager import PackageManagerKind
from src.core.models.target import InstallTarget, ResolvedInstall
from src.core.services.package_install import (
    detect_package_manager,
    get_profile,
    parse_target_spec,
    plan_install,
    resolve_install,
)

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """A planned install, and its execution once it has run."""

    target: InstallTarget
    manager: PackageManagerKind
    resolved: ResolvedInstall
    plan: CommandPlan
    execution: ExecutionResult | None = None
    config_path: Path | None = None

    @property
    def dry_run(self) -> bool:
        return bool(self.execution and self.execution.dry_run)

    def to_dict(self) -> dict:
        return {
            "target": self.target.model_dump(),
            "manager": self.manager.value,
            "identifier": self.resolved.identifier,
            "identifier_source": self.resolved.identifier_source,
            "version": self.resolved.version,
            "version_source": self.resolved.version_source,
            "command": self.plan.render(),
            "argv": self.plan.argv,
            "dry_run": self.dry_run,
            "exit_status": self.execution.exit_status if self.execution else None,
            "config_path": str(self.config_path) if self.config_path else None,
        }


def wants_sudo(ctx: RuntimeContext) -> bool:
    """Privileged managers get ``sudo`` on POSIX when not already root."""
    return not ctx.is_windows and not ctx.is_root and ctx.has_executable("sudo")


def prepare_install(
    raw_spec: str,
    ctx: RuntimeContext,
    config_path: Path | None = None,
    assume_yes: bool = False,
    allow_passthrough: bool = False,
) -> InstallResult:
    """Parse, detect, resolve and plan, without running anything.

    Raises:
        QbitError: Any parse, config, detection, resolution or planning
            failure.
    """
    target = parse_target_spec(raw_spec)
    logger.debug("Parsed install target: %s", target)

    manager: PackageManagerKind | None = None
    try:
        config = load_project_config(ctx.cwd, config_path=config_path, required=False)
        order = config.settings.package_managers if config else None

        manager = detect_package_manager(ctx, order=order)
        resolved = resolve_install(target, config, manager, allow_passthrough=allow_passthrough)

        plan = plan_install(
            resolved,
            manager,
            working_directory=ctx.cwd,
            use_sudo=get_profile(manager).privileged and wants_sudo(ctx),
            assume_yes=assume_yes,
        )
    except QbitError as e:
        e.annotate(package=target.name, manager=manager.value if manager else None)
        raise

    logger.info("Install plan for '%s': %s", target.name, plan.render())

    return InstallResult(
        target=target,
        manager=manager,
        resolved=resolved,
        plan=plan,
        config_path=config.source if config else None,
    )


def execute_install(
    result: InstallResult,
    dry_run: bool = False,
    runner: CommandRunner | None = None,
) -> InstallResult:
    """Run (or dry-run) a prepared install.

    Raises:
        SpawnError: The package manager could not be launched.
        NonZeroExit: The package manager failed.
    """
    try:
        result.execution = execute(result.plan, dry_run=dry_run, runner=runner)
    except ExecError as e:
        e.annotate(package=result.target.name, manager=result.manager.value)
        raise
    return result


def install_package(
    raw_spec: str,
    ctx: RuntimeContext,
    config_path: Path | None = None,
    dry_run: bool = False,
    assume_yes: bool = False,
    allow_passthrough: bool = False,
    runner: CommandRunner | None = None,
) -> InstallResult:
    """Install (or plan installing) one package.

    Args:
        raw_spec: ``name`` or ``name:version``.
        ctx: Runtime context (cwd, PATH, platform).
        config_path: Explicit config file (``--config``).
        dry_run: Plan and render only.
        assume_yes: Pass the manager's non-interactive flag.
        allow_passthrough: Install unconfigured names verbatim.
        runner: Process runner override (tests).

    Raises:
        QbitError: Any parse, config, detection, resolution, planning or
            execution failure.
    """
    result = prepare_install(
        raw_spec,
        ctx,
        config_path=config_path,
        assume_yes=assume_yes,
        allow_passthrough=allow_passthrough,
    )
    return execute_install(result, dry_run=dry_run, runner=runner)
