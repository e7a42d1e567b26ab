"""
Detection use case — report which package manager ``install`` would use.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from src.core.config.loader import load_project_config
from src.core.context import RuntimeContext
from src.core.models.package_manager import PackageManagerKind
from src.core.services.package_install import (
    candidate_order,
    detect_package_manager,
    get_profile,
)

logger = logging.getLogger(__name__)


@dataclass
class DetectResult:
    """Result of the detect use case."""

    manager: PackageManagerKind
    executable_path: str | None
    platform: str
    candidates: list[PackageManagerKind] = field(default_factory=list)
    override: str | None = None
    os_family: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "manager": self.manager.value,
            "executable": get_profile(self.manager).executable,
            "executable_path": self.executable_path,
            "platform": self.platform,
            "os_family": list(self.os_family),
            "candidates": [c.value for c in self.candidates],
            "override": self.override,
        }


def run_detect(ctx: RuntimeContext, config_path: Path | None = None) -> DetectResult:
    """Detect the package manager, honouring ``settings.package_managers``.

    Raises:
        DetectionError: No manager found, or a bad QBIT_PACKAGE_MANAGER.
        ConfigError: The project config exists but is invalid.
    """
    config = load_project_config(ctx.cwd, config_path=config_path, required=False)
    order = config.settings.package_managers if config else None
    candidates = list(order) if order else candidate_order(ctx)

    manager = detect_package_manager(ctx, order=order)
    return DetectResult(
        manager=manager,
        executable_path=ctx.which(get_profile(manager).executable),
        platform=ctx.platform,
        candidates=candidates,
        override=ctx.manager_override,
        os_family=ctx.os_family,
    )
