"""Logging helpers used by the sutkit pytest plugin.

This module provides a Rich console handler for the harness' own loggers, a
parser for ``--sutkit-log-level`` values, and a one-line startup summary.
"""

from __future__ import annotations

import logging
import platform
import re
import sys
from typing import TYPE_CHECKING, Literal, TypeAlias

import pytest
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

    from sutkit.mocking.mode import MockMode

PROJECT_LOGGER = "sutkit"


def parse_log_levels(value: str | list[str] | tuple[str, ...]) -> dict[str, int]:
    """Parse ``LEVEL`` and ``NAME=LEVEL`` items into a name->level dict.

    Items may be repeated or separated by commas/whitespace. A bare ``LEVEL``
    applies to the ``sutkit`` logger; later items override earlier ones.

    Args:
        value: The raw option value(s).

    Returns:
        Mapping of logger names to numeric logging levels.

    Raises:
        ValueError: If an item names an unknown level.
    """
    raw = value if isinstance(value, (list, tuple)) else [value]
    items = [s for v in raw for s in re.split(r"[,\s]+", v) if s]
    levels: dict[str, int] = {}
    for item in items:
        name, _, level_str = item.rpartition("=")
        level = logging.getLevelName(level_str.strip().upper())
        if not isinstance(level, int):
            raise ValueError(f"Invalid log level: {level_str}")
        levels[name.strip() or PROJECT_LOGGER] = level
    return levels


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Configure and return a RichHandler for console output.

    The handler writes to stderr. In debug mode it is set to DEBUG and
    includes source file/line information.

    Args:
        level: Minimum level for console output (overridden to DEBUG in debug_mode).
        debug_mode: When True, enable debug formatting (show_path, timestamps).
        color: Enable color output when True.

    Returns:
        RichHandler: Configured handler to attach to the `sutkit` logger.
    """
    ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]
    color_system: ColorSystem | None = "auto" if color else None

    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=debug_mode,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    handler.setFormatter(logging.Formatter(fmt="%(name)s: %(message)s"))
    return handler


def log_startup(
    logger: Logger,
    *,
    version: str,
    mock_mode: MockMode,
    logger_levels: dict[str, int],
) -> None:
    """Log a one-line summary of the harness configuration, then diagnostics.

    Args:
        logger: Logger used to emit startup messages.
        version: sutkit version string.
        mock_mode: The session's default mock mode.
        logger_levels: Mapping of logger names to their configured levels.
    """
    logger.info("sutkit %s, default mock mode=%s", version, mock_mode.value)
    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("pytest: %s", pytest.__version__)
    logger.debug(
        "Logger levels: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()},
    )
