"""
L2 Planner — ResolvedInstall → CommandPlan.

Pure functions of their inputs: no filesystem, no network, no PATH
lookups.  Whether to prefix ``sudo`` is decided by the caller and passed
in, which keeps dry-run output identical to what a live run executes.
"""

from __future__ import annotations

from pathlib import Path

from src.core.errors import PlanError
from src.core.models.command import CommandPlan
from src.core.models.package_manager import PackageManagerKind
from src.core.models.target import ResolvedInstall
from src.core.services.package_install.managers import (
    ManagerProfile,
    PinStyle,
    get_profile,
)


def plan_install(
    resolved: ResolvedInstall,
    manager: PackageManagerKind,
    *,
    working_directory: Path = Path("."),
    use_sudo: bool = False,
    assume_yes: bool = False,
) -> CommandPlan:
    """Compose the install command for one resolved package.

    Args:
        resolved: Output of the resolver.
        manager: Manager to plan for.
        working_directory: Where the command runs.
        use_sudo: Prefix privileged managers with ``sudo``.
        assume_yes: Add the manager's non-interactive flag.

    Raises:
        PlanError: The version cannot be expressed for this manager.
    """
    profile = get_profile(manager)
    identifier = resolved.identifier.strip()
    if not identifier:
        raise PlanError(
            f"Resolved identifier for `{resolved.name}` is empty for `{manager.value}`.",
            package=resolved.name,
            manager=manager.value,
        )

    version = _validate_version(resolved, profile)
    args = list(profile.install_args)

    if version is None:
        args.append(identifier)
        args.extend(profile.extra_args)
    elif profile.pin_style is PinStyle.EQUALS:
        args.append(f"{identifier}={version}")
        args.extend(profile.extra_args)
    elif profile.pin_style is PinStyle.DASH:
        args.append(f"{identifier}-{version}")
        args.extend(profile.extra_args)
    elif profile.pin_style is PinStyle.AT:
        args.append(_at_pinned(resolved, identifier, version))
        args.extend(profile.extra_args)
    elif profile.pin_style is PinStyle.FLAG:
        args.append(identifier)
        args.extend(profile.extra_args)
        args.extend(["--version", version])
    else:  # PinStyle.NONE is rejected by _validate_version
        raise AssertionError(f"unhandled pin style {profile.pin_style}")

    if assume_yes and profile.yes_flag and profile.yes_flag not in args:
        args.insert(args.index(profile.subcommand) + 1, profile.yes_flag)

    if use_sudo and profile.privileged:
        return CommandPlan(
            executable="sudo",
            arguments=(profile.executable, *args),
            working_directory=working_directory,
        )

    return CommandPlan(
        executable=profile.executable,
        arguments=tuple(args),
        working_directory=working_directory,
    )


def plan_script_step(command: str, *, working_directory: Path, platform: str) -> CommandPlan:
    """Wrap one script command in the platform shell."""
    if platform.startswith("win"):
        return CommandPlan(
            executable="cmd",
            arguments=("/C", command),
            working_directory=working_directory,
        )
    return CommandPlan(
        executable="sh",
        arguments=("-c", command),
        working_directory=working_directory,
    )


def _validate_version(resolved: ResolvedInstall, profile: ManagerProfile) -> str | None:
    if resolved.version is None:
        return None

    version = resolved.version.strip()
    manager = profile.kind.value
    if not version:
        raise PlanError(
            f"Version for `{resolved.name}` is empty for `{manager}`.",
            package=resolved.name,
            manager=manager,
        )
    if any(ch.isspace() for ch in version):
        raise PlanError(
            f"Version `{version}` for `{resolved.name}` contains whitespace, "
            f"which is not valid for `{manager}`. Use a compact version like `3.12`.",
            package=resolved.name,
            manager=manager,
        )
    if not profile.supports_pinning:
        raise PlanError(
            f"`{manager}` cannot pin `{resolved.name}` to version {version} in a "
            "single install command. Remove `:<version>` or install that "
            "version manually.",
            package=resolved.name,
            manager=manager,
        )
    return version


def _at_pinned(resolved: ResolvedInstall, identifier: str, version: str) -> str:
    """Homebrew style ``formula@version``."""
    if any(ch.isspace() for ch in identifier):
        raise PlanError(
            f"Cannot derive a versioned Homebrew formula from `{identifier}`: "
            "formula names contain no whitespace.",
            package=resolved.name,
            manager=resolved.manager.value,
        )
    if "@" in identifier:
        existing = identifier.rsplit("@", 1)[1]
        if existing == version:
            return identifier
        raise PlanError(
            f"Homebrew identifier `{identifier}` already includes version "
            f"`{existing}`. Remove the version `{version}` or update "
            f"identifiers.brew for `{resolved.name}`.",
            package=resolved.name,
            manager=resolved.manager.value,
        )
    if identifier.endswith("/"):
        raise PlanError(
            f"Cannot derive a versioned Homebrew formula from `{identifier}`. "
            f"Set identifiers.brew to `<formula>@{version}`.",
            package=resolved.name,
            manager=resolved.manager.value,
        )
    return f"{identifier}@{version}"
