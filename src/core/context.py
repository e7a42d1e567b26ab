"""
Runtime context — the process state the core is allowed to look at.

Detection and resolution need a handful of process-global facts: the
working directory, environment variables (PATH, QBIT_PACKAGE_MANAGER),
the platform, the Linux distribution family and whether we run as root.
They are captured ONCE by the entry point:

    - CLI:    main.py  → RuntimeContext.from_process(project_root=...)
    - Tests:  conftest → RuntimeContext(cwd=tmp_path, env={"PATH": ...})

and passed down explicitly.  Nothing below this layer reads ``os.environ``
or ``os.getcwd()`` on its own, so tests can fake a whole machine without
touching real process state.
"""

from __future__ import annotations

import os
import platform as _platform
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

# Env var that forces a specific package manager
PACKAGE_MANAGER_ENV = "QBIT_PACKAGE_MANAGER"


@dataclass(frozen=True)
class RuntimeContext:
    """Snapshot of the process state for one invocation."""

    cwd: Path
    env: Mapping[str, str] = field(default_factory=dict)
    platform: str = sys.platform        # "linux", "darwin", "win32", ...
    os_family: tuple[str, ...] = ()     # /etc/os-release ID + ID_LIKE
    is_root: bool = False

    @classmethod
    def from_process(cls, project_root: Path | None = None) -> RuntimeContext:
        """Capture the real process state."""
        geteuid = getattr(os, "geteuid", None)
        return cls(
            cwd=(project_root or Path.cwd()).resolve(),
            env=dict(os.environ),
            platform=sys.platform,
            os_family=_read_os_family() if sys.platform.startswith("linux") else (),
            is_root=bool(geteuid and geteuid() == 0),
        )

    @property
    def is_windows(self) -> bool:
        return self.platform.startswith("win")

    @property
    def search_path(self) -> str:
        return self.env.get("PATH", "")

    def which(self, executable: str) -> str | None:
        """Resolve an executable on this context's PATH (not the process's)."""
        return shutil.which(executable, path=self.search_path)

    def has_executable(self, executable: str) -> bool:
        return self.which(executable) is not None

    @property
    def manager_override(self) -> str | None:
        """Raw QBIT_PACKAGE_MANAGER value, or None when unset."""
        return self.env.get(PACKAGE_MANAGER_ENV)


def _read_os_family() -> tuple[str, ...]:
    """Return os-release ID followed by ID_LIKE entries, lowercased."""
    try:
        info = _platform.freedesktop_os_release()
    except OSError:
        return ()

    ids = [info.get("ID", "")]
    ids.extend(info.get("ID_LIKE", "").split())
    return tuple(i.lower() for i in ids if i)
