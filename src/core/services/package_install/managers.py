"""
L0 Data — Package manager profiles.

One row per PackageManagerKind: executable, config keys, install
subcommand, version-pin style and non-interactive flag.  Pure data;
the planner and detector read it, nothing writes it.

The table is checked for exhaustiveness at import, so a new kind
without a row fails on startup instead of falling through to a default.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.core.models.package_manager import PackageManagerKind

PM = PackageManagerKind


class PinStyle(str, Enum):
    """How a version pin is spelled on the command line."""

    EQUALS = "equals"   # name=1.2
    DASH = "dash"       # name-1.2
    AT = "at"           # name@1.2
    FLAG = "flag"       # name --version 1.2
    NONE = "none"       # no single-command pinning


@dataclass(frozen=True)
class ManagerProfile:
    """Command conventions for one package manager."""

    kind: PackageManagerKind
    executable: str
    config_keys: tuple[str, ...]         # keys accepted under ``identifiers``
    install_args: tuple[str, ...]        # args before the identifier
    extra_args: tuple[str, ...] = ()     # args after the identifier
    pin_style: PinStyle = PinStyle.EQUALS
    yes_flag: str | None = None
    privileged: bool = False             # wants sudo on POSIX

    @property
    def subcommand(self) -> str:
        return self.install_args[0]

    @property
    def supports_pinning(self) -> bool:
        return self.pin_style is not PinStyle.NONE


MANAGER_PROFILES: dict[PackageManagerKind, ManagerProfile] = {
    PM.APT: ManagerProfile(
        kind=PM.APT,
        executable="apt-get",
        config_keys=("apt", "apt-get"),
        install_args=("install",),
        pin_style=PinStyle.EQUALS,
        yes_flag="-y",
        privileged=True,
    ),
    PM.DNF: ManagerProfile(
        kind=PM.DNF,
        executable="dnf",
        config_keys=("dnf",),
        install_args=("install",),
        pin_style=PinStyle.DASH,
        yes_flag="-y",
        privileged=True,
    ),
    PM.PACMAN: ManagerProfile(
        kind=PM.PACMAN,
        executable="pacman",
        config_keys=("pacman",),
        install_args=("-S",),
        pin_style=PinStyle.NONE,
        yes_flag="--noconfirm",
        privileged=True,
    ),
    PM.ZYPPER: ManagerProfile(
        kind=PM.ZYPPER,
        executable="zypper",
        config_keys=("zypper",),
        install_args=("install",),
        pin_style=PinStyle.EQUALS,
        yes_flag="-y",
        privileged=True,
    ),
    PM.BREW: ManagerProfile(
        kind=PM.BREW,
        executable="brew",
        config_keys=("brew", "homebrew"),
        install_args=("install",),
        pin_style=PinStyle.AT,
    ),
    PM.WINGET: ManagerProfile(
        kind=PM.WINGET,
        executable="winget",
        config_keys=("winget",),
        install_args=("install", "--id"),
        extra_args=(
            "--exact",
            "--accept-source-agreements",
            "--accept-package-agreements",
        ),
        pin_style=PinStyle.FLAG,
        yes_flag="--silent",
    ),
    PM.CHOCO: ManagerProfile(
        kind=PM.CHOCO,
        executable="choco",
        config_keys=("choco", "chocolatey"),
        install_args=("install",),
        pin_style=PinStyle.FLAG,
        yes_flag="-y",
    ),
    PM.SCOOP: ManagerProfile(
        kind=PM.SCOOP,
        executable="scoop",
        config_keys=("scoop",),
        install_args=("install",),
        pin_style=PinStyle.NONE,
    ),
}

# Detection order per platform (sys.platform prefix → candidates)
PLATFORM_CANDIDATES: dict[str, tuple[PackageManagerKind, ...]] = {
    "linux": (PM.APT, PM.DNF, PM.PACMAN, PM.ZYPPER),
    "darwin": (PM.BREW,),
    "win32": (PM.WINGET, PM.CHOCO, PM.SCOOP),
}

# os-release ID / ID_LIKE → the distribution's native manager
OS_FAMILY_PREFERENCE: dict[str, PackageManagerKind] = {
    "debian": PM.APT,
    "ubuntu": PM.APT,
    "fedora": PM.DNF,
    "rhel": PM.DNF,
    "centos": PM.DNF,
    "arch": PM.PACMAN,
    "suse": PM.ZYPPER,
    "opensuse": PM.ZYPPER,
}


def get_profile(kind: PackageManagerKind) -> ManagerProfile:
    return MANAGER_PROFILES[kind]


def check_profiles_exhaustive() -> None:
    """Raise if any PackageManagerKind lacks a profile row."""
    missing = [k.value for k in PackageManagerKind if k not in MANAGER_PROFILES]
    if missing:
        raise RuntimeError(
            f"No manager profile for: {', '.join(missing)}. "
            "Add a row to MANAGER_PROFILES."
        )
    for kind, profile in MANAGER_PROFILES.items():
        if profile.kind is not kind:
            raise RuntimeError(f"Profile for {kind.value} is keyed as {profile.kind.value}")


check_profiles_exhaustive()
