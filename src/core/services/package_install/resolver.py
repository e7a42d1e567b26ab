"""
L2 Resolver — logical package name → manager-specific identifier.

Precedence for the identifier:
    1. ``install.<name>.identifiers.<manager>`` (any of its config keys)
    2. ``install.<name>.identifiers.default``
    3. the literal name, ONLY when passthrough is explicitly allowed

Precedence for the version:
    1. inline ``name:version`` from the request
    2. ``install.<name>.version``
    3. none (no pin)
"""

from __future__ import annotations

import logging

from src.core.errors import MissingIdentifier, UnknownPackage
from src.core.models.package_manager import PackageManagerKind
from src.core.models.target import InstallTarget, ResolvedInstall
from src.core.models.workflow import WorkflowConfig
from src.core.services.package_install.managers import get_profile

logger = logging.getLogger(__name__)


def resolve_install(
    target: InstallTarget,
    config: WorkflowConfig | None,
    manager: PackageManagerKind,
    allow_passthrough: bool = False,
) -> ResolvedInstall:
    """Resolve a parsed request for the detected manager.

    Args:
        target: Parsed request.
        config: Project config, or None when there is no config file.
        manager: Detected package manager.
        allow_passthrough: Caller-level opt-in (``--allow-passthrough``);
            ORed with ``settings.allow_passthrough``.

    Raises:
        UnknownPackage: No ``install.<name>`` entry and no passthrough.
        MissingIdentifier: Entry exists but has no usable identifier.
    """
    entry = config.get_install(target.name) if config else None

    if entry is None:
        permitted = allow_passthrough or bool(config and config.settings.allow_passthrough)
        if not permitted:
            raise UnknownPackage(target.name, manager.value)
        logger.info("No install entry for '%s'; passing the name through", target.name)
        return ResolvedInstall(
            name=target.name,
            identifier=target.name,
            version=target.version,
            manager=manager,
            identifier_source="passthrough",
            version_source="inline" if target.version else None,
        )

    found = entry.lookup(get_profile(manager).config_keys)
    if found is None:
        raise MissingIdentifier(target.name, manager.value)
    identifier, source = found

    if target.version:
        version, version_source = target.version, "inline"
    elif entry.version:
        version, version_source = entry.version, "config"
    else:
        version, version_source = None, None

    logger.debug(
        "Resolved '%s' for %s → %s (%s identifier, version %s)",
        target.name,
        manager.value,
        identifier,
        source,
        version or "unpinned",
    )
    return ResolvedInstall(
        name=target.name,
        identifier=identifier,
        version=version,
        manager=manager,
        identifier_source=source,
        version_source=version_source,
    )
