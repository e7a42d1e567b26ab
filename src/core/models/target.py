"""
Install target models — what the user asked for and what it resolved to.

InstallTarget is the parsed ``name[:version]`` request.  ResolvedInstall
is the same request after the config layers were consulted: the concrete
identifier to hand to the package manager plus the version pin, and
where each came from.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from src.core.models.package_manager import PackageManagerKind


class InstallTarget(BaseModel):
    """A parsed install request.  Immutable."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str | None = None

    def __str__(self) -> str:
        return f"{self.name}:{self.version}" if self.version else self.name


class ResolvedInstall(BaseModel):
    """An install request resolved against the config for one manager."""

    model_config = ConfigDict(frozen=True)

    name: str                       # logical name as requested
    identifier: str                 # what the package manager sees
    version: str | None = None
    manager: PackageManagerKind
    identifier_source: Literal["manager", "default", "passthrough"]
    version_source: Literal["inline", "config"] | None = None
