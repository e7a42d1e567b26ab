"""
Workflow config model — the ``scripts`` / ``install`` / ``settings`` schema.

Loaded from qbit.yml (or qbit.toml) by ``src.core.config.loader`` and
read-only for the rest of the invocation.  Both file formats map onto
these same models.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence, Union

from pydantic import (
    BaseModel,
    Field,
    PrivateAttr,
    RootModel,
    field_validator,
    model_validator,
)

from src.core.models.package_manager import PackageManagerKind

# Key in ``identifiers`` used when no manager-specific entry matches
DEFAULT_IDENTIFIER_KEY = "default"


def _coerce_version(value: Any) -> Any:
    """YAML/TOML hand us ``15`` as an int; that one is safe to stringify.

    Floats are not: ``3.10`` arrives as ``3.1``, so they must be quoted.
    """
    if isinstance(value, bool):
        return value  # let validation reject it
    if isinstance(value, float):
        raise ValueError(
            f"version {value!r} was read as a number and may have lost digits; "
            'quote it in the config (e.g. version: "3.10")'
        )
    if isinstance(value, int):
        return str(value)
    return value


class ScriptEntry(RootModel[Union[str, list[str]]]):
    """One command, or an ordered list of commands."""

    @model_validator(mode="after")
    def _no_blank_commands(self) -> ScriptEntry:
        commands = [self.root] if isinstance(self.root, str) else self.root
        for cmd in commands:
            if not cmd.strip():
                raise ValueError("script commands must be non-empty strings")
        return self

    @property
    def commands(self) -> list[str]:
        if isinstance(self.root, str):
            return [self.root]
        return list(self.root)

    @property
    def is_empty(self) -> bool:
        return not self.commands


class InstallEntry(BaseModel):
    """How to install one logical package.

    Either the full form::

        postgres:
          version: "15"
          identifiers: {apt: postgresql, default: postgresql}

    or the shorthand ``python: "3.12"`` (a version with no identifiers).
    """

    version: str | None = None
    identifiers: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, (str, int, float)) and not isinstance(data, bool):
            return {"version": data}
        return data

    @field_validator("version", mode="before")
    @classmethod
    def _version_to_str(cls, v: Any) -> Any:
        return _coerce_version(v)

    @field_validator("version")
    @classmethod
    def _version_not_blank(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("version must not be empty")
        return v

    @field_validator("identifiers", mode="before")
    @classmethod
    def _identifiers_default(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("identifiers")
    @classmethod
    def _identifiers_not_blank(cls, v: dict[str, str]) -> dict[str, str]:
        cleaned: dict[str, str] = {}
        for key, ident in v.items():
            if not ident.strip():
                raise ValueError(f"identifier for '{key}' must not be empty")
            cleaned[key.strip().lower()] = ident.strip()
        return cleaned

    def lookup(self, keys: Sequence[str]) -> tuple[str, str] | None:
        """Find an identifier for the first matching key, then ``default``.

        Returns:
            ``(identifier, "manager" | "default")`` or None.
        """
        for key in keys:
            if key in self.identifiers:
                return self.identifiers[key], "manager"
        if DEFAULT_IDENTIFIER_KEY in self.identifiers:
            return self.identifiers[DEFAULT_IDENTIFIER_KEY], "default"
        return None


class WorkflowSettings(BaseModel):
    """Optional ``settings`` section."""

    # Install unknown names verbatim instead of failing
    allow_passthrough: bool = False
    # Replaces the platform's detection order
    package_managers: list[PackageManagerKind] | None = None

    @field_validator("package_managers", mode="before")
    @classmethod
    def _resolve_aliases(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        out = []
        for item in v:
            kind = PackageManagerKind.from_name(item) if isinstance(item, str) else None
            out.append(kind if kind is not None else item)
        return out


class WorkflowConfig(BaseModel):
    """Root of qbit.yml / qbit.toml."""

    scripts: dict[str, ScriptEntry] = Field(default_factory=dict)
    install: dict[str, InstallEntry] = Field(default_factory=dict)
    settings: WorkflowSettings = Field(default_factory=WorkflowSettings)

    # Where this config was read from (not part of the file schema)
    _source: Path | None = PrivateAttr(default=None)

    @field_validator("scripts", "install", "settings", mode="before")
    @classmethod
    def _empty_section(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def source(self) -> Path | None:
        return self._source

    def bind_source(self, path: Path) -> WorkflowConfig:
        self._source = path
        return self

    @property
    def source_label(self) -> str:
        return str(self._source) if self._source else "<memory>"

    def get_script(self, name: str) -> ScriptEntry | None:
        return self.scripts.get(name)

    def get_install(self, name: str) -> InstallEntry | None:
        return self.install.get(name)
