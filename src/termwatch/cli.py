"""CLI entry point using typer."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from typer.core import TyperCommand

from termwatch import __version__
from termwatch.config import LoggingConfig, build_run_config, load_config
from termwatch.loop import RefreshLoop
from termwatch.services.runner import SpawnError

USAGE = "usage:  termwatch [-tbehv] [--verbose] [-n <interval>] command"

EXIT_USAGE = 1
EXIT_BROKEN_PIPE = 128 + signal.SIGPIPE

err_console = Console(stderr=True)


def _click_usage_error() -> type[Exception]:
    """UsageError from the click that typer builds its commands on.

    Newer typer releases bundle their own click, so the standalone package's
    exception class is not the one raised by the parser.
    """
    for base in TyperCommand.__mro__:
        if base.__name__ == "Command" and base is not TyperCommand:
            return sys.modules[base.__module__].UsageError
    raise ImportError("typer.core.TyperCommand has no click Command base")


UsageError = _click_usage_error()


class WatchCommand(TyperCommand):
    """Command whose usage errors print the short usage and exit with status 1."""

    def parse_args(self, ctx: typer.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except UsageError as e:
            err_console.print(e.format_message(), markup=False, highlight=False)
            err_console.print(USAGE, markup=False, highlight=False)
            raise typer.Exit(EXIT_USAGE)


app = typer.Typer(
    name="termwatch",
    help="Execute a command periodically, showing its output full-screen.",
    add_completion=False,
)


def setup_logging(config: LoggingConfig, verbose: bool) -> None:
    """Log to the configured file; with --verbose and no file, log to stderr."""
    handlers: list[logging.Handler] = []
    if config.file:
        log_path = Path(config.file).expanduser().resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_path)))
    elif verbose:
        handlers.append(logging.StreamHandler())

    if not handlers:
        return

    level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


@app.command(
    cls=WatchCommand,
    context_settings={"help_option_names": [], "allow_interspersed_args": False},
)
def watch(
    command: list[str] = typer.Argument(None, help="Command to run; words are joined with spaces"),
    interval: str = typer.Option(None, "-n", "--interval", metavar="SECONDS", help="Seconds between runs"),
    no_title: bool = typer.Option(False, "-t", "--no-title", help="Do not show the header"),
    beep: bool = typer.Option(False, "-b", "--beep", help="Beep if the command fails"),
    errexit: bool = typer.Option(False, "-e", "--errexit", help="Exit if the command fails"),
    show_help: bool = typer.Option(False, "-h", "--help", help="Show usage and exit"),
    version: bool = typer.Option(False, "-v", "--version", help="Show version and exit"),
    verbose: bool = typer.Option(False, "--verbose", help="Log debug output"),
) -> None:
    """Execute a command periodically, showing its output full-screen."""
    if show_help:
        err_console.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(EXIT_USAGE)

    if version:
        err_console.print(__version__, highlight=False)
        raise typer.Exit(0)

    if not command:
        err_console.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(EXIT_USAGE)

    try:
        app_config = load_config()
    except (OSError, ValueError) as e:
        err_console.print(f"[red]Could not load configuration: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        run_config = build_run_config(
            app_config,
            command,
            interval=interval,
            no_title=no_title,
            beep=beep,
            errexit=errexit,
            verbose=verbose,
        )
    except ValueError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        err_console.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(EXIT_USAGE)

    setup_logging(app_config.logging, verbose)

    try:
        status = asyncio.run(RefreshLoop(run_config, console=err_console).run())
    except SpawnError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    except BrokenPipeError:
        # The reader went away; stop quietly, as SIGPIPE would have.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        raise typer.Exit(EXIT_BROKEN_PIPE)

    raise typer.Exit(status)


if __name__ == "__main__":
    app()
