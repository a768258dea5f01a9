# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Logging configuration for the EdgeServer client and CLI.

The library logs through loguru with structured keyword fields; nothing is
emitted to the terminal until an application calls ``configure_logging``.
"""

import sys
from typing import TYPE_CHECKING

from loguru import logger


if TYPE_CHECKING:
    from loguru import Record


COLORS = {
    "amber": "#F2B134",  # Warnings
    "green": "#4FA36C",  # Success
    "muted": "#8A9BA8",  # Timestamps, secondary text, debug
    "text": "#E8EDF1",  # Primary text
    "red": "#C8553D",  # Errors
    "blue": "#4F8FCB",  # Info, identifiers
    "dim": "#56636D",  # Separators, trace
}

# Level names accepted from flags and LOG_LEVEL, mapped to loguru levels
LEVEL_ALIASES = {
    "trace": "TRACE",
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "warning": "WARNING",
    "error": "ERROR",
    "fatal": "CRITICAL",
    "critical": "CRITICAL",
}

DEFAULT_LEVEL = "INFO"


def _log_format(record: "Record") -> str:
    """Build the loguru format string for one record.

    Args:
        record: Loguru record containing level, message and extra fields.

    Returns:
        Format string with loguru color tags.
    """
    level = record["level"].name

    level_colors = {
        "TRACE": f"<fg {COLORS['dim']}>",
        "DEBUG": f"<fg {COLORS['muted']}>",
        "INFO": f"<fg {COLORS['blue']}>",
        "SUCCESS": f"<fg {COLORS['green']}>",
        "WARNING": f"<fg {COLORS['amber']}>",
        "ERROR": f"<fg {COLORS['red']}>",
        "CRITICAL": f"<fg {COLORS['red']}><bold>",
    }

    color = level_colors.get(level, f"<fg {COLORS['text']}>")
    close = "</>"

    # Format: timestamp | level | message [extra]
    fmt = (
        f"<fg {COLORS['muted']}>{{time:HH:mm:ss.SSS}}{close}"
        f" <fg {COLORS['dim']}>│{close} "
        f"{color}{{level: <8}}{close}"
        f"<fg {COLORS['dim']}>│{close} "
        f"<fg {COLORS['text']}>{{message}}{close}"
    )

    extra = record["extra"]
    if extra:
        extra_str = " ".join(f"{k}={v!r}" for k, v in extra.items())
        # Escape braces so payload text is not parsed as format fields
        extra_str = extra_str.replace("{", "{{").replace("}", "}}")
        # Escape angle brackets so payload text is not parsed as color tags
        extra_str = extra_str.replace("<", r"\<")
        fmt += f" <fg {COLORS['muted']}>│ {extra_str}{close}"

    fmt += "\n"

    if record["exception"]:
        fmt += "{exception}\n"

    return fmt


def normalize_level(level: str) -> str | None:
    """Map a user-supplied level name to a loguru level.

    Args:
        level: Level name such as "debug", "warn" or "ERROR".

    Returns:
        The loguru level name, or None if the name is unknown.
    """
    return LEVEL_ALIASES.get(level.strip().lower())


def configure_logging(level: str = "info") -> None:
    """Configure loguru to write coloured records to stderr.

    Enables the records of the ``edgeserver`` package, which are disabled on
    import, removes the default handler and installs one with the EdgeServer
    format. An unknown level falls back to INFO with a warning.

    Args:
        level: Minimum level to display (e.g. "debug", "info", "warn").
    """
    resolved = normalize_level(level)

    logger.enable("edgeserver")
    logger.remove()
    logger.add(
        sys.stderr,
        level=resolved or DEFAULT_LEVEL,
        format=_log_format,
        colorize=True,
    )

    if resolved is None:
        logger.warning(f"Invalid log level '{level}', using 'info'")
