"""
Logging setup for the deploygen CLI.

Modules log through ``logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once, before any command runs.

Console level: ``-v``/``-q``/``--debug`` flag, else $DGEN_LOG_LEVEL,
else WARNING.  $DGEN_LOG_FILE adds a file handler whose level comes
from $DGEN_LOG_FILE_LEVEL (console level if unset).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "DGEN_LOG_LEVEL"
ENV_LOG_FILE = "DGEN_LOG_FILE"
ENV_LOG_FILE_LEVEL = "DGEN_LOG_FILE_LEVEL"

_DETAIL = logging.Formatter(
    "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# (highest level, formatter) pairs, checked in order
_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAIL),
    (logging.INFO, logging.Formatter("%(asctime)s [%(name)s] %(message)s", datefmt="%H:%M:%S")),
)
_PLAIN = logging.Formatter("%(message)s")

# PyYAML is the only dependency that logs
_NOISY_LOGGERS = ("yaml",)


def resolve_level(verbose: bool = False, quiet: bool = False, debug: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Replace the root logger's handlers with deploygen's.

    Args:
        level: Console level name. Unknown names mean WARNING.
        log_file: Also log to this file when given.
        log_file_level: File level name; defaults to ``level``.
        quiet_third_party: Hold library loggers at WARNING unless the
            console is at DEBUG.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(_parse_level(log_file_level or level))
        file_handler.setFormatter(_DETAIL)
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _console_formatter(level: int) -> logging.Formatter:
    for ceiling, formatter in _CONSOLE_FORMATS:
        if level <= ceiling:
            return formatter
    return _PLAIN


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; WARNING if missing or unknown."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
