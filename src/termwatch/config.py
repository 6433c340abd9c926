"""Configuration management using TOML + environment variables."""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

CONFIG_DIR = Path.home() / ".termwatch"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_INTERVAL = 2

_ATOI_RE = re.compile(r"\s*([+-]?\d+)")


@dataclass
class WatchConfig:
    interval: int = DEFAULT_INTERVAL
    no_title: bool = False
    beep: bool = False
    errexit: bool = False


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = ""


@dataclass
class AppConfig:
    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


@dataclass(frozen=True)
class RunConfig:
    """Settings for one termwatch session, fixed once the loop starts."""

    command: str
    interval: int = DEFAULT_INTERVAL
    no_title: bool = False
    beep: bool = False
    errexit: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.command.strip():
            raise ValueError("No command given.")
        if self.interval < 0:
            raise ValueError(f"Interval must not be negative: {self.interval}")


def parse_interval(text: str) -> int:
    """Parse an interval the way atoi(3) does: leading digits, else 0."""
    match = _ATOI_RE.match(text)
    if match is None:
        return 0
    return int(match.group(1))


def _typed(section: dict, key: str, default):
    """Read ``key`` from a TOML table, requiring the same type as its default."""
    value = section.get(key.rsplit(".", 1)[1], default)
    # bool is a subclass of int, so compare exact types.
    if type(value) is not type(default):
        raise ValueError(f"{key} must be {type(default).__name__}, got {value!r}")
    return value


def load_config() -> AppConfig:
    """Load configuration from TOML file with env var overrides."""
    config = AppConfig()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            data = tomllib.load(f)

        watch = data.get("watch", {})
        config.watch.interval = _typed(watch, "watch.interval", config.watch.interval)
        config.watch.no_title = _typed(watch, "watch.no_title", config.watch.no_title)
        config.watch.beep = _typed(watch, "watch.beep", config.watch.beep)
        config.watch.errexit = _typed(watch, "watch.errexit", config.watch.errexit)

        logging_cfg = data.get("logging", {})
        config.logging.level = _typed(logging_cfg, "logging.level", config.logging.level)
        config.logging.file = _typed(logging_cfg, "logging.file", config.logging.file)

    # Environment variable overrides
    if env_interval := os.environ.get("TERMWATCH_INTERVAL"):
        config.watch.interval = parse_interval(env_interval)
    if env_log_level := os.environ.get("TERMWATCH_LOG_LEVEL"):
        config.logging.level = env_log_level
    if env_log_file := os.environ.get("TERMWATCH_LOG_FILE"):
        config.logging.file = env_log_file

    return config


def build_run_config(
    app_config: AppConfig,
    command: list[str],
    interval: str | None = None,
    no_title: bool = False,
    beep: bool = False,
    errexit: bool = False,
    verbose: bool = False,
) -> RunConfig:
    """Merge command-line flags over the loaded defaults."""
    watch = app_config.watch
    return RunConfig(
        command=" ".join(command),
        interval=parse_interval(interval) if interval is not None else watch.interval,
        no_title=no_title or watch.no_title,
        beep=beep or watch.beep,
        errexit=errexit or watch.errexit,
        verbose=verbose,
    )
