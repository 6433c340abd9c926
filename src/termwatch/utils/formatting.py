"""Header formatting for the refresh screen."""

from __future__ import annotations

import time

from rich.console import Console

# Slack so the status line does not wrap on terminals near the exact boundary.
HEADER_SLACK = 5
RULE_CHAR = "_"


def format_label(interval: int) -> str:
    """Format the interval label, e.g. ``"Every  2s: "``."""
    return f"Every {interval:2d}s: "


def format_timestamp(now: float | None = None) -> str:
    """Format wall-clock time as ``"Www Mmm dd hh:mm:ss yyyy\\n"``."""
    return time.ctime(now) + "\n"


def header_padding(width: int, label: str, command: str, timestamp: str) -> int:
    """Number of spaces between the command text and the timestamp."""
    padding = width - len(label) - len(timestamp) - len(command) + HEADER_SLACK
    return max(padding, 0)


def format_header(width: int, interval: int, command: str, now: float | None = None) -> str:
    """Build the status line, a full-width rule and a blank line."""
    label = format_label(interval)
    timestamp = format_timestamp(now)
    padding = header_padding(width, label, command, timestamp)
    rule = RULE_CHAR * width
    return f"{label}{command}{' ' * padding}{timestamp}{rule}\n\n"


def render_header(
    console: Console,
    width: int,
    interval: int,
    command: str,
    now: float | None = None,
) -> str:
    """Write the header to the diagnostic console and return it."""
    header = format_header(width, interval, command, now)
    # Written raw so the command text reaches the terminal unaltered.
    console.file.write(header)
    console.file.flush()
    return header
