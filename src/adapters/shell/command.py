"""
Subprocess runner — launch a planned command in the foreground.

The child inherits the terminal's stdin/stdout/stderr (package managers
prompt for passwords and confirmations) and we block until it exits.
No timeout is imposed; Ctrl-C reaches the child through the OS.
"""

from __future__ import annotations

import logging
import subprocess
import time

from src.adapters.base import CommandRunner
from src.core.errors import SpawnError
from src.core.models.command import CommandPlan

logger = logging.getLogger(__name__)


class SubprocessRunner(CommandRunner):
    """Run CommandPlans with ``subprocess.run``, streams inherited."""

    @property
    def name(self) -> str:
        return "subprocess"

    def run(self, plan: CommandPlan) -> int:
        rendered = plan.render()
        logger.debug("Executing: %s (cwd=%s)", rendered, plan.working_directory)
        start = time.monotonic()

        try:
            result = subprocess.run(plan.argv, cwd=plan.working_directory)
        except FileNotFoundError as e:
            target = e.filename or plan.executable
            raise SpawnError(rendered, f"not found: {target}") from e
        except PermissionError as e:
            raise SpawnError(rendered, "permission denied") from e
        except OSError as e:
            raise SpawnError(rendered, str(e)) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Exit %d after %dms: %s", result.returncode, elapsed_ms, rendered)
        return result.returncode
