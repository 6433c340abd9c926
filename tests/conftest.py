"""Shared test fixtures."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from termwatch.config import RunConfig


@pytest.fixture
def run_config():
    """Create a test configuration."""
    return RunConfig(command="echo hi", interval=1)


@pytest.fixture
def err_console():
    """A console that records what would go to stderr."""
    return Console(file=io.StringIO(), force_terminal=False, width=80)


@pytest.fixture
def output():
    """Stand-in for the binary stdout stream."""
    return io.BytesIO()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's config file and environment."""
    import termwatch.config as cfg_module

    monkeypatch.setattr(cfg_module, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(cfg_module, "CONFIG_FILE", tmp_path / "config.toml")
    for var in ("TERMWATCH_INTERVAL", "TERMWATCH_LOG_LEVEL", "TERMWATCH_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path / "config.toml"
