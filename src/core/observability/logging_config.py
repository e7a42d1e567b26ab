"""
Logging configuration — one setup call for the CLI process.

main.py calls ``setup_from_env`` once, before any command runs.  Modules
only ever do ``logger = logging.getLogger(__name__)``.

Console level, highest priority first:
    --debug  >  --verbose  >  --quiet  >  QBIT_LOG_LEVEL  >  WARNING

QBIT_LOG_FILE adds a file handler; QBIT_LOG_FILE_LEVEL sets its level
(default: same as the console).  The console writes to stderr, which
keeps ``--json`` output on stdout parseable.
"""

from __future__ import annotations

import logging
import sys
from typing import Mapping

LOG_LEVEL_ENV = "QBIT_LOG_LEVEL"
LOG_FILE_ENV = "QBIT_LOG_FILE"
LOG_FILE_LEVEL_ENV = "QBIT_LOG_FILE_LEVEL"

# ── Formats per console level ───────────────────────────────────

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: (_DETAILED, "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT = ("%(message)s", None)

_FILE_FORMAT = (_DETAILED, "%Y-%m-%d %H:%M:%S")


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env_level: str | None = None,
) -> str:
    """Pick the console level name from CLI flags and the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with ours; named loggers are left alone.

    Args:
        level: Console level name; unknown names mean WARNING.
        log_file: Optional path to append full-detail logs to.
        log_file_level: Level for ``log_file`` (default: ``level``).
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    logging.raiseExceptions = False


def setup_from_env(
    env: Mapping[str, str],
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> None:
    """``setup_logging`` driven by CLI flags plus the QBIT_LOG_* variables."""
    setup_logging(
        level=resolve_level(debug, verbose, quiet, env.get(LOG_LEVEL_ENV)),
        log_file=env.get(LOG_FILE_ENV) or None,
        log_file_level=env.get(LOG_FILE_LEVEL_ENV),
    )


def _console_handler(level: int) -> logging.Handler:
    if level <= logging.DEBUG:
        fmt, datefmt = _CONSOLE_FORMATS[logging.DEBUG]
    elif level <= logging.INFO:
        fmt, datefmt = _CONSOLE_FORMATS[logging.INFO]
    else:
        fmt, datefmt = _CONSOLE_DEFAULT
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    fmt, datefmt = _FILE_FORMAT
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    numeric = getattr(logging, level.upper(), None) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
