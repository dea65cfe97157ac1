"""
Logging configuration — one call at CLI startup wires every module logger.

Service modules only ever do ``logger = logging.getLogger(__name__)``;
handlers and levels are decided here. The console level comes from, in
order: ``--debug``/``-v``/``-q``, then ``MA_LOG_LEVEL``, then
``log_level`` in analytics.yml, then WARNING.

Console output gets more context the lower the level: bare messages at
WARNING and above, timestamps and logger names at INFO, file and line at
DEBUG. The optional log file always gets the DEBUG layout.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_PACKAGE_LOGGER = "modular_analytics"

_DEBUG_LAYOUT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S")
_INFO_LAYOUT = ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S")
_PLAIN_LAYOUT = ("%(message)s", None)
_FILE_LAYOUT = (_DEBUG_LAYOUT[0], "%Y-%m-%d %H:%M:%S")


def level_from_flags(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    fallback: str | None = None,
) -> str:
    """Pick a level name from CLI flags, falling back to a configured level."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return fallback or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install the console handler and, optionally, a log file handler.

    Replaces any handlers already on the root logger, so calling it again
    (as every CLI invocation in a test run does) does not stack output.

    Args:
        level: Console level name. Unknown names mean WARNING.
        log_file: Path of a log file to append to.
        log_file_level: Level for the log file; defaults to ``level``.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(Path(log_file), file_level))

    lowest = min(h.level for h in handlers)
    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(lowest)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(lowest)

    # A handler bound to a closed stream must not crash a command
    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    if level <= logging.DEBUG:
        fmt, datefmt = _DEBUG_LAYOUT
    elif level <= logging.INFO:
        fmt, datefmt = _INFO_LAYOUT
    else:
        fmt, datefmt = _PLAIN_LAYOUT
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(*_FILE_LAYOUT))
    return handler


def _parse_level(name: str | None) -> int:
    """Level name to its numeric value; anything unrecognised is WARNING."""
    value = logging.getLevelName(name.upper()) if name else None
    return value if isinstance(value, int) else logging.WARNING
