"""
L1 Parsing — ``name[:version]`` install requests.

Splits on the FIRST colon only, so dotted or colon-bearing versions
survive intact::

    "postgres:15"        → InstallTarget(name="postgres", version="15")
    "chrome:127.0.0.0"   → InstallTarget(name="chrome", version="127.0.0.0")
    "  jq  "             → InstallTarget(name="jq", version=None)

Anything else raises InvalidSpec.  Work is linear in the input and the
input length is capped, so arbitrary bytes can be fed in safely.
"""

from __future__ import annotations

import unicodedata

from src.core.errors import InvalidSpec
from src.core.models.target import InstallTarget

# Longest request we bother looking at
MAX_SPEC_LENGTH = 512


def parse_target_spec(raw: str | bytes) -> InstallTarget:
    """Parse a raw install request.

    Args:
        raw: User input, as text or undecoded bytes.

    Returns:
        The parsed InstallTarget.

    Raises:
        InvalidSpec: Empty name or version, control characters,
            undecodable bytes, or input over MAX_SPEC_LENGTH.
    """
    if isinstance(raw, bytes):
        if len(raw) > MAX_SPEC_LENGTH * 4:
            raise InvalidSpec(_preview(raw), "too long")
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidSpec(_preview(raw), "not valid UTF-8") from None

    if len(raw) > MAX_SPEC_LENGTH:
        raise InvalidSpec(_preview(raw), f"longer than {MAX_SPEC_LENGTH} characters")

    # Lone surrogates come from os.fsdecode of undecodable argv bytes
    if any(unicodedata.category(ch) == "Cs" for ch in raw):
        raise InvalidSpec(_preview(raw), "not valid UTF-8")

    if any(unicodedata.category(ch) == "Cc" for ch in raw):
        raise InvalidSpec(raw, "contains control characters")

    name, sep, version = raw.partition(":")
    name = name.strip()
    if not name:
        raise InvalidSpec(raw, "package name is empty")

    if not sep:
        return InstallTarget(name=name)

    version = version.strip()
    if not version:
        raise InvalidSpec(raw, "version after ':' is empty")

    return InstallTarget(name=name, version=version)


def _preview(raw: str | bytes) -> str:
    if isinstance(raw, str):
        text = raw.encode("utf-8", "backslashreplace").decode("utf-8")
    else:
        text = raw[:64].decode("utf-8", "replace")
    return text[:64] + ("…" if len(text) > 64 else "")
