"""Terminal geometry and screen control."""

from __future__ import annotations

import logging
import os
import sys

from rich.console import Console

from termwatch.models import TerminalGeometry

logger = logging.getLogger(__name__)


def probe_geometry() -> TerminalGeometry:
    """Query the terminal size, falling back to 80x24 when there is no terminal."""
    for stream in (sys.stderr, sys.stdout):
        try:
            size = os.get_terminal_size(stream.fileno())
        except (AttributeError, OSError, ValueError):
            continue
        if size.columns > 0 and size.lines > 0:
            return TerminalGeometry(width=size.columns, height=size.lines)
    logger.debug("Terminal size unavailable, using %dx%d", TerminalGeometry.width, TerminalGeometry.height)
    return TerminalGeometry()


def clear_screen(console: Console) -> None:
    """Clear the screen and home the cursor. Does nothing when not on a terminal."""
    console.clear()
