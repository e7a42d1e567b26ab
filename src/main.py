"""
qbit — CLI entrypoint.

Usage:
    python -m src.main --help
    python -m src.main install postgres:15
    python -m src.main --dry-run run dev
    python -m src.main config check

This is the only place that prints, and the only place that turns a
QbitError into an exit code (see src/core/errors.py for the table).
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import NoReturn

import click

from src import __version__
from src.core.context import RuntimeContext
from src.core.errors import ExecError, QbitError, exit_code_for_status
from src.core.observability.logging_config import setup_from_env

# Exit code when the user hits Ctrl-C
EXIT_INTERRUPTED = 130


@click.group()
@click.version_option(version=__version__, prog_name="qbit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--dry-run",
    "-n",
    is_flag=True,
    help="Plan only: print what would run, never spawn a process.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to qbit.yml / qbit.toml (default: auto-detect in project root).",
)
@click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    envvar="QBIT_PROJECT_ROOT",
    default=None,
    help="Project directory (default: current directory).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    dry_run: bool,
    config_path: Path | None,
    project_root: Path | None,
) -> None:
    """qbit — install system packages and run project scripts."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["dry_run"] = dry_run
    ctx.obj["config_path"] = config_path

    if project_root is None and config_path is not None:
        project_root = config_path.parent
    ctx.obj["project_root"] = project_root

    # ── Logging setup (once, at process start) ──────────────────
    setup_from_env(os.environ, debug=debug, verbose=verbose, quiet=quiet)


def _runtime(ctx: click.Context) -> RuntimeContext:
    return RuntimeContext.from_process(project_root=ctx.obj.get("project_root"))


def _fail(err: QbitError, as_json: bool = False) -> NoReturn:
    """Report a typed error, with the package or script it concerned, and exit."""
    if as_json:
        payload = {
            "error": str(err),
            "kind": type(err).__name__,
            "exit_code": err.exit_code,
            "package": err.package,
            "manager": err.manager,
            "script": err.script,
        }
        click.echo(json.dumps(payload, indent=2))
        sys.exit(err.exit_code)

    click.secho(f"❌ {err}", fg="red", err=True)
    if err.package:
        manager = err.manager or "not detected"
        click.echo(f"   Package: {err.package} (package manager: {manager})", err=True)
    if err.script is not None:
        if isinstance(err, ExecError) and err.step_index is not None:
            click.echo(
                f"   Script: {err.script}, step {err.step_index + 1}: {err.command}",
                err=True,
            )
        else:
            click.echo(f"   Script: {err.script}", err=True)
    sys.exit(err.exit_code)


def _interrupted() -> NoReturn:
    click.secho("\n⊘ Interrupted", fg="yellow", err=True)
    sys.exit(EXIT_INTERRUPTED)


# ── install ─────────────────────────────────────────────────────


@cli.command()
@click.argument("spec")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Don't ask for confirmation.")
@click.option(
    "--allow-passthrough",
    is_flag=True,
    help="Install names with no config entry verbatim.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    spec: str,
    assume_yes: bool,
    allow_passthrough: bool,
    as_json: bool,
) -> None:
    """Install a system package: SPEC is name or name:version.

    Examples:

        qbit install postgres:15

        qbit --dry-run install chrome:127.0.0.0
    """
    from src.core.use_cases.install import execute_install, prepare_install

    dry_run = ctx.obj.get("dry_run", False)
    quiet = ctx.obj.get("quiet", False)

    try:
        result = prepare_install(
            spec,
            _runtime(ctx),
            config_path=ctx.obj.get("config_path"),
            assume_yes=assume_yes,
            allow_passthrough=allow_passthrough,
        )

        if not as_json and not quiet:
            resolved = result.resolved
            version_label = f" {resolved.version}" if resolved.version else ""
            click.secho(
                f"\n📦 {result.target.name}{version_label} → {resolved.identifier}",
                fg="cyan",
                bold=True,
            )
            click.echo(f"   Package manager: {result.manager.value}")
            if result.config_path:
                click.echo(f"   Config: {result.config_path}")

        if dry_run and not as_json:
            click.echo(f"   [dry-run] would run: {result.plan.render()}")
        elif not as_json and not quiet:
            click.echo(f"   Executing: {result.plan.render()}\n")

        execute_install(result, dry_run=dry_run)
    except KeyboardInterrupt:
        _interrupted()
    except QbitError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not dry_run and not quiet:
        click.secho(f"\n✅ Installed {result.target.name}", fg="green", bold=True)


# ── run ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("script")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(ctx: click.Context, script: str, as_json: bool) -> None:
    """Run a named script from qbit.yml / qbit.toml.

    Examples:

        qbit run dev

        qbit --dry-run run ci
    """
    from src.core.use_cases.run import run_script

    dry_run = ctx.obj.get("dry_run", False)
    quiet = ctx.obj.get("quiet", False)

    def _progress(index: int, total: int, command: str) -> None:
        if not as_json and not quiet:
            click.secho(f"[script:{script}] step {index + 1}/{total} -> {command}", fg="cyan")

    try:
        result = run_script(
            script,
            _runtime(ctx),
            config_path=ctx.obj.get("config_path"),
            dry_run=dry_run,
            on_step=_progress,
        )
    except KeyboardInterrupt:
        _interrupted()
    except QbitError as e:
        _fail(e, as_json)

    execution = result.execution

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif dry_run:
        for idx, (step, line) in enumerate(zip(result.steps, execution.planned), start=1):
            click.echo(f"[dry-run] [script:{script}] step {idx} -> {step}")
            click.echo(f"   would run: {line}")
    elif not execution.ok:
        click.secho(
            f"❌ Script `{script}` failed at step {execution.step_number}/"
            f"{len(result.steps)}: `{execution.command}` exited with code "
            f"{execution.exit_status}",
            fg="red",
            err=True,
        )
    elif not quiet:
        click.secho(f"✅ {script}: {execution.steps_run} step(s) succeeded", fg="green")

    if not execution.ok:
        sys.exit(exit_code_for_status(execution.exit_status))


# ── detect ──────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show which package manager `install` would use."""
    from src.core.use_cases.detect import run_detect

    try:
        result = run_detect(_runtime(ctx), config_path=ctx.obj.get("config_path"))
    except QbitError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho(f"\n🔍 Package manager: {result.manager.value}", fg="cyan", bold=True)
    click.echo(f"   Executable: {result.executable_path}")
    click.echo(f"   Platform:   {result.platform}")
    if result.os_family:
        click.echo(f"   OS family:  {', '.join(result.os_family)}")
    if result.override is not None:
        click.echo(f"   Override:   QBIT_PACKAGE_MANAGER={result.override}")
    else:
        click.echo(f"   Candidates: {', '.join(c.value for c in result.candidates)}")
    click.echo()


# ── config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Project configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate qbit.yml / qbit.toml."""
    from src.core.use_cases.config_check import check_config

    root = _runtime(ctx).cwd
    result = check_config(root, config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   File:    {result.config_path}")
        click.echo(f"   Scripts: {len(result.config.scripts)}")
        click.echo(f"   Install: {len(result.config.install)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(result.exit_code)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
