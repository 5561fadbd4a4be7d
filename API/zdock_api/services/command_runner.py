import asyncio
import logging
import os
import signal
from typing import Sequence

from zdock_api.domain.errors import CommandInvocationFailed, CommandTimedOut
from zdock_api.domain.ports import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

# How long to keep draining output after the process group was killed
KILL_DRAIN_SECONDS = 1.0


class SubprocessCommandRunner(CommandRunner):
    """
    Runs the container runtime binary with stdout and stderr merged.

    Each invocation gets its own session so a timeout can kill the runtime
    together with anything it spawned that still holds the output pipe.
    """

    def __init__(self, binary: str = "zdocker", timeout: float | None = 30.0):
        self.binary = binary
        self.timeout = timeout

    async def run(self, args: Sequence[str]) -> CommandResult:
        args = list(args)
        op = " ".join([self.binary, *args[:1]])
        logger.debug("[RUNTIME] %s %s", self.binary, " ".join(args))

        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as exc:
            raise CommandInvocationFailed(op, exc.strerror or str(exc))

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            output = await self._kill(proc)
            logger.warning("[RUNTIME] %s timed out after %ss, killed", op, self.timeout)
            raise CommandTimedOut(op, self.timeout, output=output)

        result = CommandResult(args=args, exit_code=proc.returncode, output=_decode(stdout))
        if not result.ok:
            logger.info("[RUNTIME] %s exited with %s", op, result.exit_code)
        return result

    async def _kill(self, proc: asyncio.subprocess.Process) -> str:
        """SIGKILL the process group, then drain what's left of the output for a bounded time."""
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=KILL_DRAIN_SECONDS)
        except asyncio.TimeoutError:
            # Something outside the group still holds the pipe
            await proc.wait()
            return ""
        return _decode(stdout)


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")
