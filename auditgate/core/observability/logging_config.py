"""
Logging configuration for the auditgate CLI.

``setup_logging`` runs once, from the click group callback. Modules
only ever do ``logger = logging.getLogger(__name__)``.

Console records carry the marker an operator of shell audit scripts
expects, coloured when stderr is a terminal:

    [*]  info      [!]  warning      [-]  error

Level precedence: ``--debug`` / ``--quiet``  >  AUDITGATE_LOG_LEVEL  >  INFO.
AUDITGATE_LOG_FILE adds a detailed file log (owner-only, appended),
with its own threshold from AUDITGATE_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys

import click

_DETAILED = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d  %(message)s"
_CONSOLE_DATEFMT = "%H:%M:%S"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MODE = 0o600

# level → (marker, colour)
_MARKERS = {
    logging.DEBUG: ("[.]", "white"),
    logging.INFO: ("[*]", "blue"),
    logging.WARNING: ("[!]", "yellow"),
    logging.ERROR: ("[-]", "red"),
    logging.CRITICAL: ("[-]", "red"),
}


class MarkerFormatter(logging.Formatter):
    """Prefix each console record with its level marker."""

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, color: bool = True):
        super().__init__(fmt, datefmt=datefmt)
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        marker, colour = _MARKERS.get(record.levelno, ("[?]", "white"))
        if self._color:
            marker = click.style(marker, fg=colour, bold=True)
        return f"{marker}  {super().format(record)}"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_file_level: str | None = None,
    color: bool | None = None,
) -> None:
    """Replace the root logger's handlers with auditgate's.

    Args:
        level: Console level name. DEBUG also switches the console to
            the detailed format.
        log_file: Optional path of a file log.
        log_file_level: Level for the file log (default: ``level``).
        color: Colour the markers (default: only when stderr is a TTY).
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level, sys.stderr.isatty() if color is None else color)]

    if log_file:
        file_level = _parse_level(log_file_level or level)
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    # A closed console stream (e.g. a detached pipe) must not kill a run
    logging.raiseExceptions = False


def _console_handler(level: int, color: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if level <= logging.DEBUG:
        handler.setFormatter(MarkerFormatter(_DETAILED, datefmt=_CONSOLE_DATEFMT, color=color))
    else:
        handler.setFormatter(MarkerFormatter("%(message)s", color=color))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    # Owner-only before the handler opens it
    os.close(os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, LOG_FILE_MODE))
    os.chmod(path, LOG_FILE_MODE)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAILED, datefmt=_FILE_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to number; unknown or empty names mean INFO."""
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.INFO
