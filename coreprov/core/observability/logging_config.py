"""
Logging configuration — installed once by the CLI before any command runs.

Modules log through ``logging.getLogger(__name__)``; nothing below the
CLI touches handlers.

Console level, highest priority first:
    --debug / --verbose / --quiet  >  COREPROV_LOG_LEVEL  >  WARNING

A second, file-backed handler is added when COREPROV_LOG_FILE (or the
``log_file`` argument) names a path. Routers running the installer
from init scripts have no terminal, so the file is often the only
record of which mirror failed.
"""

from __future__ import annotations

import logging
import os
import sys

LEVEL_ENV_VAR = "COREPROV_LOG_LEVEL"
FILE_ENV_VAR = "COREPROV_LOG_FILE"
FILE_LEVEL_ENV_VAR = "COREPROV_LOG_FILE_LEVEL"

# Console layouts, chosen by how chatty the console is:
# (threshold, format, datefmt); the first threshold >= level wins.
_CONSOLE_LAYOUTS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_PLAIN = "%(message)s"

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# asyncio reports every subprocess transport at DEBUG
_NOISY_LOGGERS = ("asyncio",)


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LEVEL_ENV_VAR, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with coreprov's console/file pair.

    Args:
        level: Console level name. Unknown names mean WARNING.
        log_file: File to append to. Falls back to ``$COREPROV_LOG_FILE``;
            no file handler when neither is set.
        log_file_level: Level for the file. Falls back to
            ``$COREPROV_LOG_FILE_LEVEL``, then to the console level.
    """
    console_level = _parse_level(level)
    log_file = log_file or os.environ.get(FILE_ENV_VAR)
    log_file_level = log_file_level or os.environ.get(FILE_LEVEL_ENV_VAR)

    handlers: list[logging.Handler] = [_console_handler(console_level)]
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers[:] = handlers
    # Handlers filter on their own; the root must let the lowest one through.
    root.setLevel(min(h.level for h in handlers))

    if console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # A closed stderr (daemonized run) must not turn log calls into tracebacks.
    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _CONSOLE_PLAIN, None
    for threshold, layout, layout_datefmt in _CONSOLE_LAYOUTS:
        if level <= threshold:
            fmt, datefmt = layout, layout_datefmt
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name → numeric level, WARNING for anything unrecognized."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
