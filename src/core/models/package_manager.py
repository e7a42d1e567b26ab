"""
Package manager kinds — the closed set of native managers qbit drives.

Adding a member here without a matching row in
``src.core.services.package_install.managers.MANAGER_PROFILES`` fails at
import time.
"""

from __future__ import annotations

from enum import Enum


class PackageManagerKind(str, Enum):
    """A supported native package manager."""

    APT = "apt"
    DNF = "dnf"
    PACMAN = "pacman"
    ZYPPER = "zypper"
    BREW = "brew"
    WINGET = "winget"
    CHOCO = "choco"
    SCOOP = "scoop"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> PackageManagerKind | None:
        """Look up a kind by its name or a common alias (case-insensitive)."""
        key = name.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


_ALIASES: dict[str, str] = {
    "apt-get": "apt",
    "homebrew": "brew",
    "chocolatey": "choco",
}
