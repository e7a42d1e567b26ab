"""
L3 Detection — which native package manager is authoritative here.

Read-only: looks at the RuntimeContext (platform, os-release family,
PATH, QBIT_PACKAGE_MANAGER) and never runs anything.  "Available"
means the manager's executable resolves on the context's PATH.

Results are never cached; every invocation detects again.
"""

from __future__ import annotations

import logging
from typing import Sequence

from src.core.context import PACKAGE_MANAGER_ENV, RuntimeContext
from src.core.errors import DetectionError, NoPackageManagerFound
from src.core.models.package_manager import PackageManagerKind
from src.core.services.package_install.managers import (
    MANAGER_PROFILES,
    OS_FAMILY_PREFERENCE,
    PLATFORM_CANDIDATES,
    get_profile,
)

logger = logging.getLogger(__name__)


def candidate_order(ctx: RuntimeContext) -> list[PackageManagerKind]:
    """Default detection order for the context's platform.

    On Linux the distribution's native manager (from os-release
    ID/ID_LIKE) is moved to the front; the remaining candidates keep
    their table order.
    """
    for prefix, candidates in PLATFORM_CANDIDATES.items():
        if ctx.platform.startswith(prefix):
            order = list(candidates)
            break
    else:
        return list(MANAGER_PROFILES)

    for family in ctx.os_family:
        preferred = OS_FAMILY_PREFERENCE.get(family)
        if preferred in order:
            order.remove(preferred)
            order.insert(0, preferred)
            break

    return order


def detect_package_manager(
    ctx: RuntimeContext,
    order: Sequence[PackageManagerKind] | None = None,
) -> PackageManagerKind:
    """Pick the package manager to use.

    Args:
        ctx: Runtime context to probe.
        order: Explicit candidate order (e.g. ``settings.package_managers``).
            Replaces the platform default.

    Returns:
        The first available manager.

    Raises:
        DetectionError: QBIT_PACKAGE_MANAGER is empty or unknown.
        NoPackageManagerFound: Nothing in the candidate list is on PATH.
    """
    override = ctx.manager_override
    if override is not None:
        return _detect_override(ctx, override)

    candidates = list(order) if order else candidate_order(ctx)
    checked: list[str] = []
    for kind in candidates:
        profile = get_profile(kind)
        checked.append(kind.value)
        if ctx.has_executable(profile.executable):
            logger.info("Detected package manager: %s", kind.value)
            return kind
        logger.debug("%s not available (%s not on PATH)", kind.value, profile.executable)

    raise NoPackageManagerFound(checked, platform=ctx.platform)


def _detect_override(ctx: RuntimeContext, raw: str) -> PackageManagerKind:
    name = raw.strip()
    if not name:
        raise DetectionError(
            f"{PACKAGE_MANAGER_ENV} is set but empty. Set it to a supported "
            "manager name (for example `apt`, `brew`, `winget`) or unset it."
        )

    kind = PackageManagerKind.from_name(name)
    if kind is None:
        supported = ", ".join(k.value for k in PackageManagerKind)
        raise DetectionError(
            f"Unknown package manager `{name}` in {PACKAGE_MANAGER_ENV}. "
            f"Supported values: {supported}."
        )

    profile = get_profile(kind)
    if not ctx.has_executable(profile.executable):
        raise NoPackageManagerFound([kind.value], platform=ctx.platform)

    logger.info("Using package manager from %s: %s", PACKAGE_MANAGER_ENV, kind.value)
    return kind
