"""
Error taxonomy — every failure the core can report, with its exit code.

Components raise these and never print.  The CLI (main.py) is the only
place that turns one into a message and a process exit code, so scripts
calling ``qbit`` can branch on the failure class:

    0   success
    1   any other QbitError
    2   InvalidSpec
    3   DetectionError / NoPackageManagerFound
    4   UnknownPackage
    5   MissingIdentifier
    6   PlanError
    7   SpawnError
    *   NonZeroExit           (mirrors the child's status)
    8   EmptyWorkflow
    9   ConfigNotFoundError
    10  ConfigParseError
    11  ConfigSchemaError
    12  UnknownScript
"""

from __future__ import annotations


class QbitError(Exception):
    """Base class for all reportable failures.

    ``package``, ``manager`` and ``script`` name what was being worked on
    when the error happened.  Components that know them set them in the
    constructor; use cases fill in the rest through ``annotate`` so the
    CLI can always name the failing package or script.
    """

    exit_code: int = 1

    package: str | None = None
    manager: str | None = None
    script: str | None = None

    def annotate(
        self,
        *,
        package: str | None = None,
        manager: str | None = None,
        script: str | None = None,
    ) -> None:
        """Fill in context that is not already set."""
        self.package = self.package or package
        self.manager = self.manager or manager
        self.script = self.script or script


# ── Parsing ─────────────────────────────────────────────────────


class InvalidSpec(QbitError):
    """Raised when an install request is not a valid ``name[:version]``."""

    exit_code = 2

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid install target {raw!r}: {reason}")


# ── Detection ───────────────────────────────────────────────────


class DetectionError(QbitError):
    """Raised when the package manager cannot be determined."""

    exit_code = 3


class NoPackageManagerFound(DetectionError):
    """No candidate package manager is on PATH."""

    def __init__(self, checked: list[str], platform: str = ""):
        self.checked = list(checked)
        self.platform = platform
        where = f" on {platform}" if platform else ""
        super().__init__(
            f"No supported package manager detected in PATH{where}. "
            f"Checked: {', '.join(self.checked) or 'nothing'}. "
            "Install one of them or set QBIT_PACKAGE_MANAGER."
        )


# ── Resolution ──────────────────────────────────────────────────


class ResolveError(QbitError):
    """Base for identifier resolution failures."""

    def __init__(self, message: str, package: str, manager: str):
        self.package = package
        self.manager = manager
        super().__init__(message)


class UnknownPackage(ResolveError):
    """The logical name has no ``install.<name>`` entry at all."""

    exit_code = 4

    def __init__(self, package: str, manager: str):
        super().__init__(
            f"Unknown package `{package}` for package manager `{manager}`: "
            f"no install.{package} entry in the project config. Add one, "
            "or pass --allow-passthrough to install the name verbatim.",
            package,
            manager,
        )


class MissingIdentifier(ResolveError):
    """The entry exists but has neither a manager-specific nor default id."""

    exit_code = 5

    def __init__(self, package: str, manager: str):
        super().__init__(
            f"Package `{package}` has no identifier for package manager "
            f"`{manager}`. Define install.{package}.identifiers.{manager} "
            f"or install.{package}.identifiers.default.",
            package,
            manager,
        )


# ── Planning ────────────────────────────────────────────────────


class PlanError(QbitError):
    """The resolved install cannot be expressed for this manager."""

    exit_code = 6

    def __init__(self, message: str, package: str | None = None, manager: str | None = None):
        self.package = package
        self.manager = manager
        super().__init__(message)


# ── Execution ───────────────────────────────────────────────────


class ExecError(QbitError):
    """Base for process execution failures."""

    def __init__(self, message: str, command: str, step_index: int | None = None):
        self.command = command
        self.step_index = step_index
        super().__init__(message)


class SpawnError(ExecError):
    """The executable could not be launched at all."""

    exit_code = 7

    def __init__(self, command: str, reason: str, step_index: int | None = None):
        self.reason = reason
        super().__init__(
            f"Could not launch `{command}`: {reason}", command, step_index
        )


class NonZeroExit(ExecError):
    """The process ran and returned a non-zero status."""

    def __init__(self, command: str, code: int, step_index: int | None = None):
        self.code = code
        super().__init__(
            f"Command `{command}` exited with code {code}", command, step_index
        )

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return exit_code_for_status(self.code)


def exit_code_for_status(status: int) -> int:
    """Map a child's status to our own exit code (signals → 128+N)."""
    if status < 0:
        return 128 + (-status)
    return status if 0 < status < 256 else 1


class EmptyWorkflow(QbitError):
    """A script entry with no steps was asked to run."""

    exit_code = 8

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Script `{name}` has no commands to run.")


# ── Configuration ───────────────────────────────────────────────


class ConfigError(QbitError):
    """Raised when project configuration is invalid or missing."""

    exit_code = 9


class ConfigNotFoundError(ConfigError):
    """No config file where one is required."""

    exit_code = 9


class ConfigParseError(ConfigError):
    """The config file is not valid YAML / TOML."""

    exit_code = 10

    def __init__(self, message: str, location: str | None = None):
        self.location = location
        super().__init__(message)


class ConfigSchemaError(ConfigError):
    """A recognised field has the wrong shape."""

    exit_code = 11

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


class UnknownScript(QbitError):
    """``run <name>`` for a name not under ``scripts``."""

    exit_code = 12

    def __init__(self, name: str, config_path: str, available: list[str]):
        self.name = name
        self.config_path = config_path
        self.available = available
        hint = f" Available: {', '.join(available)}." if available else ""
        super().__init__(f"Script `{name}` not found in {config_path}.{hint}")
