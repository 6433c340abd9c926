"""Data models for termwatch."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 24


@dataclass(frozen=True)
class TerminalGeometry:
    """Terminal size in columns and rows."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT


@dataclass
class CycleResult:
    """Outcome of one command execution."""

    returncode: int = 0
    execution_time_ms: int = 0

    @property
    def signaled(self) -> bool:
        return self.returncode < 0

    @property
    def failed(self) -> bool:
        return self.returncode != 0

    @property
    def exit_status(self) -> int:
        """Status to propagate, using the shell's 128 + signum for signaled children."""
        if self.signaled:
            return 128 - self.returncode
        return self.returncode
