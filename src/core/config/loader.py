"""
Configuration loader — reads qbit.yml / qbit.toml into domain models.

This is the primary entry point for loading project configuration.
It reads YAML or TOML, validates against the Pydantic schema, and
returns a typed WorkflowConfig.

Only the project root is searched.  When more than one candidate file
exists, the first one in CONFIG_CANDIDATES wins and the rest are
ignored — never merged.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.core.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigSchemaError,
)
from src.core.models.workflow import WorkflowConfig

logger = logging.getLogger(__name__)

# Config filenames, in precedence order
CONFIG_CANDIDATES: tuple[str, ...] = ("qbit.yml", "qbit.yaml", "qbit.toml")

__all__ = [
    "CONFIG_CANDIDATES",
    "ConfigError",
    "find_config_file",
    "load_project_config",
    "load_workflow_config",
]


def find_config_file(root: Path) -> Path | None:
    """Return the config file honoured in ``root``, or None."""
    found = [root / name for name in CONFIG_CANDIDATES if (root / name).is_file()]
    if not found:
        return None

    for ignored in found[1:]:
        logger.debug("Ignoring %s (%s takes precedence)", ignored.name, found[0].name)
    return found[0]


def load_workflow_config(path: Path) -> WorkflowConfig:
    """Load and validate one config file.

    Args:
        path: Path to a ``.yml``/``.yaml`` or ``.toml`` file.

    Returns:
        Validated WorkflowConfig bound to ``path``.

    Raises:
        ConfigNotFoundError: The file does not exist.
        ConfigParseError: The file is not valid YAML/TOML.
        ConfigSchemaError: A field has the wrong shape.
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    logger.debug("Loading project config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Cannot read {path}: {e}") from e

    if path.suffix == ".toml":
        data = _parse_toml(raw, path)
    else:
        data = _parse_yaml(raw, path)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigSchemaError(
            f"Expected a mapping at the top of {path}, got {type(data).__name__}"
        )

    try:
        config = WorkflowConfig.model_validate(data)
    except ValidationError as e:
        fields = list(dict.fromkeys(_dotted(err["loc"]) for err in e.errors()))
        details = "; ".join(
            dict.fromkeys(f"{_dotted(err['loc'])}: {err['msg']}" for err in e.errors())
        )
        raise ConfigSchemaError(
            f"Invalid configuration in {path}: {details}", fields=fields
        ) from e

    logger.info(
        "Loaded %s with %d scripts and %d install entries",
        path.name,
        len(config.scripts),
        len(config.install),
    )
    return config.bind_source(path)


def load_project_config(
    root: Path,
    config_path: Path | None = None,
    required: bool = False,
) -> WorkflowConfig | None:
    """Load the project's config, if there is one.

    Args:
        root: Project root to search.
        config_path: Explicit file (``--config``); always required to exist.
        required: Raise instead of returning None when nothing is found.

    Raises:
        ConfigNotFoundError: No config and ``required`` (or a bad --config).
    """
    if config_path is not None:
        return load_workflow_config(config_path)

    path = find_config_file(root)
    if path is None:
        if required:
            raise ConfigNotFoundError(
                f"No {'/'.join(CONFIG_CANDIDATES)} file found in {root}."
            )
        logger.debug("No project config in %s", root)
        return None

    return load_workflow_config(path)


# ── Format parsers ──────────────────────────────────────────────


def _parse_yaml(raw: str, path: Path) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        location = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            location = f"line {mark.line + 1}, column {mark.column + 1}"
        where = f" at {location}" if location else ""
        problem = getattr(e, "problem", None) or str(e)
        raise ConfigParseError(
            f"Invalid YAML in {path}{where}: {problem}", location=location
        ) from e


def _parse_toml(raw: str, path: Path) -> Any:
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        location = f"line {lineno}, column {colno}" if lineno else None
        raise ConfigParseError(f"Invalid TOML in {path}: {e}", location=location) from e


def _dotted(loc: tuple[Any, ...]) -> str:
    # RootModel unions add type tags ("str", "list[str]") to the location
    parts = [str(p) for p in loc if p not in ("str", "list[str]")]
    return ".".join(parts) or "<root>"
