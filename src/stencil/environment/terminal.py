"""Terminal color helpers for compact error diagnostics.

ANSI codes are applied only when the terminal supports them. Honors the
NO_COLOR and FORCE_COLOR environment variables.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
}

ColorName = Literal["reset", "bold", "red", "green", "yellow", "cyan", "bright_red"]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Check if the terminal supports colors and the user allows them.

    Respects:
        - FORCE_COLOR (overrides everything)
        - NO_COLOR (https://no-color.org/)
        - sys.stderr.isatty() for TTY detection
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stderr.isatty()


_USE_COLORS = _should_use_colors()


def colorize(text: str, *colors: ColorName) -> str:
    """Wrap text in ANSI color codes when colors are enabled.

    Example:
        >>> colorize("Error", "red", "bold")
        '\\033[31m\\033[1mError\\033[0m'  # if colors supported
        'Error'  # if colors not supported
    """
    if not _USE_COLORS or not colors:
        return text

    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI color codes from text."""
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def hint(text: str) -> str:
    return colorize(text, "green")



def format_error_header(code: str | None, message: str) -> str:
    """Format an error header, prefixed with its code when there is one.

    Example:
        >>> format_error_header("ST-TPL-001", "views/home.tpl template not found")
        'ST-TPL-001: views/home.tpl template not found'  # without colors
    """
    if code:
        return f"{error_code(code)}: {message}"
    return message
