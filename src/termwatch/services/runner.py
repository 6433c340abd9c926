"""Shell command runner service."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import BinaryIO, cast

from termwatch.config import RunConfig
from termwatch.models import CycleResult

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096
BELL = b"\a"
REAP_TIMEOUT = 1.0


class SpawnError(RuntimeError):
    """The command's process or its output pipe could not be created."""

    def __init__(self, command: str, cause: OSError) -> None:
        super().__init__(f"Could not run '{command}': {cause}")
        self.command = command
        self.cause = cause


class CommandRunner:
    """Run a command through the shell, copying its stdout verbatim."""

    def __init__(self, output: BinaryIO) -> None:
        self.output = output

    async def run(self, command: str) -> CycleResult:
        """Run ``command`` to completion and return its result.

        The child's stdout is copied to ``self.output`` chunk by chunk as it
        arrives. If the copy stops early (cancellation, or a write error such
        as ``BrokenPipeError``), the child is killed, its pipe drained and the
        process reaped before the exception propagates.
        """
        start = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Spawn failed for %r: %s", command, e)
            raise SpawnError(command, e) from e

        logger.debug("Started pid %d: %s", proc.pid, command)
        stdout = cast(asyncio.StreamReader, proc.stdout)
        try:
            while chunk := await stdout.read(CHUNK_SIZE):
                self.output.write(chunk)
                self.output.flush()
            returncode = await proc.wait()
        finally:
            if proc.returncode is None:
                logger.info("Killing pid %d", proc.pid)
                with contextlib.suppress(ProcessLookupError):
                    proc.kill()
            await _reap(proc, stdout)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("pid %d exited with %d after %dms", proc.pid, returncode, elapsed_ms)
        return CycleResult(returncode=returncode, execution_time_ms=elapsed_ms)


async def _reap(proc: asyncio.subprocess.Process, stdout: asyncio.StreamReader) -> None:
    """Discard unread output and wait for exit so the transport closes."""

    async def drain_and_wait() -> None:
        while await stdout.read(CHUNK_SIZE):
            pass
        await proc.wait()

    try:
        await asyncio.wait_for(drain_and_wait(), timeout=REAP_TIMEOUT)
    except asyncio.TimeoutError:
        # A background descendant still holds the pipe open.
        logger.warning("Gave up waiting on pid %d output pipe", proc.pid)


def apply_failure_policy(result: CycleResult, config: RunConfig, output: BinaryIO) -> int | None:
    """Beep and/or request an exit for a failed command.

    Returns the status the program should exit with, or ``None`` to keep going.
    """
    if not result.failed:
        return None

    if config.beep:
        output.write(BELL)
        output.flush()

    if config.errexit:
        logger.info("Command failed with status %d, exiting", result.exit_status)
        return result.exit_status

    return None
