"""
Logging configuration: one-time setup for the CLI entrypoint.

Modules only ever do ``logger = logging.getLogger(__name__)``; the
handlers and levels are installed here.

Level precedence:
    --debug / --verbose / --quiet  >  AGENT_INJECT_LOG_LEVEL  >  WARNING

A log file can be added with AGENT_INJECT_LOG_FILE (and its own level with
AGENT_INJECT_LOG_FILE_LEVEL).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "AGENT_INJECT_LOG_LEVEL"
ENV_LOG_FILE = "AGENT_INJECT_LOG_FILE"
ENV_LOG_FILE_LEVEL = "AGENT_INJECT_LOG_FILE_LEVEL"

_FMT_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"

# Console format by level; the first entry whose threshold the level
# reaches wins. WARNING and above print bare messages.
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, _FMT_DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def console_formatter(level: int) -> logging.Formatter:
    """Formatter for stderr: more context the more verbose the level."""
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter("%(message)s")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install the stderr handler and, optionally, a file handler.

    Rendered manifests go to stdout, so the console handler never
    writes there.
    """
    console_level = _parse_level(level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(console_formatter(console_level))

    handlers: list[logging.Handler] = [console]
    if log_file:
        file_level = _parse_level(log_file_level or level)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAILED, datefmt=_FILE_DATEFMT))
        handlers.append(fh)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; unknown or empty names mean WARNING."""
    numeric = logging.getLevelName(level.upper()) if level else logging.WARNING
    return numeric if isinstance(numeric, int) else logging.WARNING
