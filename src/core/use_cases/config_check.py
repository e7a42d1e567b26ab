"""
Config check use case — validate qbit.yml / qbit.toml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from src.core.config.loader import (
    CONFIG_CANDIDATES,
    find_config_file,
    load_workflow_config,
)
from src.core.errors import ConfigError, ConfigNotFoundError, ConfigSchemaError
from src.core.models.workflow import WorkflowConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation.

    ``exit_code`` is 0 when valid, otherwise the code of the matching
    ConfigError, so `config check` and `run` fail the same way on the
    same file.  Semantic problems count as schema errors.
    """

    valid: bool = False
    config: WorkflowConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    exit_code: int = 0

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "exit_code": self.exit_code,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "script_count": len(self.config.scripts) if self.config else 0,
            "install_count": len(self.config.install) if self.config else 0,
        }


def check_config(root: Path, config_path: Path | None = None) -> ConfigCheckResult:
    """Validate project configuration and report issues.

    Args:
        root: Project root to search.
        config_path: Optional explicit config file.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file(root)
        present = [name for name in CONFIG_CANDIDATES if (root / name).is_file()]
        if len(present) > 1:
            result.warnings.append(
                f"Multiple config files found ({', '.join(present)}); "
                f"only {present[0]} is used."
            )

    if config_path is None:
        result.errors.append(f"No {'/'.join(CONFIG_CANDIDATES)} file found in {root}.")
        result.exit_code = ConfigNotFoundError.exit_code
        return result

    result.config_path = config_path

    try:
        config = load_workflow_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        result.exit_code = e.exit_code
        return result

    # Semantic checks
    for name, entry in config.scripts.items():
        if entry.is_empty:
            result.errors.append(f"scripts.{name} has no commands.")

    for name, entry in config.install.items():
        if not entry.identifiers:
            result.warnings.append(
                f"install.{name} has no identifiers; installing it will fail "
                "until one (or identifiers.default) is added."
            )

    if not config.scripts and not config.install:
        result.warnings.append("No scripts or install entries defined.")

    result.valid = len(result.errors) == 0
    if not result.valid:
        result.exit_code = ConfigSchemaError.exit_code
    return result
