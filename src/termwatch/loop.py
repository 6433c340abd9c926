"""Refresh loop and termination signal handling."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
import sys
from typing import BinaryIO

from rich.console import Console

from termwatch.config import RunConfig
from termwatch.models import CycleResult
from termwatch.services.runner import CommandRunner, apply_failure_policy
from termwatch.utils.formatting import render_header
from termwatch.utils.terminal import clear_screen, probe_geometry

logger = logging.getLogger(__name__)

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)

EXIT_OK = 0


class RefreshLoop:
    """Clear, redraw, run and sleep until stopped.

    ``run()`` returns the process exit status: 0 after a termination signal,
    or the command's status when errexit fires. ``SpawnError`` propagates.
    """

    def __init__(
        self,
        config: RunConfig,
        runner: CommandRunner | None = None,
        console: Console | None = None,
        output: BinaryIO | None = None,
    ) -> None:
        self.config = config
        self.output = output if output is not None else sys.stdout.buffer
        self.runner = runner or CommandRunner(self.output)
        self.console = console or Console(stderr=True)
        self.cycles = 0
        self._stop = asyncio.Event()

    def request_stop(self) -> None:
        """Ask the loop to finish at its next suspension point."""
        self._stop.set()

    def _signal_handler(self, signum: int) -> None:
        logger.info("Received %s, stopping", signal.Signals(signum).name)
        self.request_stop()

    def redraw(self) -> None:
        # Probed per cycle to follow window resizes.
        geometry = probe_geometry()
        clear_screen(self.console)
        if not self.config.no_title:
            render_header(self.console, geometry.width, self.config.interval, self.config.command)

    async def run(self) -> int:
        loop = asyncio.get_running_loop()
        for sig in STOP_SIGNALS:
            loop.add_signal_handler(sig, self._signal_handler, sig)

        try:
            return await self._cycle_forever()
        finally:
            for sig in STOP_SIGNALS:
                loop.remove_signal_handler(sig)

    async def _cycle_forever(self) -> int:
        while not self._stop.is_set():
            self.cycles += 1
            self.redraw()

            result = await self._run_command()
            # Ctrl-C reaches the child too; its failure is not a command error.
            if result is None or self._stop.is_set():
                break

            status = apply_failure_policy(result, self.config, self.output)
            if status is not None:
                return status

            await self._sleep()

        logger.info("Stopped after %d cycle(s)", self.cycles)
        return EXIT_OK

    async def _run_command(self) -> CycleResult | None:
        """Run the command unless a stop request arrives first."""
        run_task = asyncio.create_task(self.runner.run(self.config.command))
        stop_task = asyncio.create_task(self._stop.wait())
        done, _ = await asyncio.wait({run_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

        if run_task in done:
            stop_task.cancel()
            return run_task.result()

        run_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await run_task
        return None

    async def _sleep(self) -> None:
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self.config.interval)
        except asyncio.TimeoutError:
            pass
