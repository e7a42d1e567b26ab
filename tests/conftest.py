"""
Shared test fixtures and configuration.

Detection only ever looks at a RuntimeContext, so tests build one with
a private PATH of fake executables instead of touching the real
environment.
"""

import stat
import sys
from pathlib import Path
from typing import Callable

import pytest

from src.adapters.mock import MockRunner
from src.core.context import RuntimeContext


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Return an empty directory to hold fake executables."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def fake_executable(bin_dir: Path) -> Callable[..., Path]:
    """Create executables in ``bin_dir`` by name."""

    def _make(*names: str) -> Path:
        for name in names:
            exe = bin_dir / (f"{name}.exe" if sys.platform.startswith("win") else name)
            exe.write_text("#!/bin/sh\nexit 0\n")
            exe.chmod(exe.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return bin_dir

    return _make


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Return an empty project root."""
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def make_ctx(bin_dir: Path, project_dir: Path) -> Callable[..., RuntimeContext]:
    """Build a RuntimeContext over the fake PATH and the temp project."""

    def _make(
        platform: str = "linux",
        env: dict[str, str] | None = None,
        os_family: tuple[str, ...] = (),
        is_root: bool = True,
    ) -> RuntimeContext:
        full_env = {"PATH": str(bin_dir)}
        full_env.update(env or {})
        return RuntimeContext(
            cwd=project_dir,
            env=full_env,
            platform=platform,
            os_family=os_family,
            is_root=is_root,
        )

    return _make


@pytest.fixture
def mock_runner() -> MockRunner:
    return MockRunner()

