"""Asynchronous execution of backend tools."""

import asyncio
import logging
import os

from cdns.core.base import CommandRunner
from cdns.core.models import CommandResult

logger = logging.getLogger(__name__)


class SubprocessRunner(CommandRunner):
    """Runs commands with asyncio subprocesses in the C locale."""

    def __init__(self, timeout: float | None = None, env: dict[str, str] | None = None):
        self.timeout = timeout
        # Tool output is parsed, so keep it untranslated.
        self.env = {**os.environ, "LC_ALL": "C", **(env or {})}

    async def run(self, *args: str) -> CommandResult:
        logger.debug(f"Running: {' '.join(args)}")

        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=self.env,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            raise TimeoutError(f"{args[0]} did not finish within {self.timeout}s") from None
        except asyncio.CancelledError:
            await self._kill(proc)
            raise

        result = CommandResult(
            args=list(args),
            returncode=proc.returncode or 0,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        if not result.ok:
            logger.debug(f"{args[0]} exited with {result.returncode}: {result.output}")
        return result

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
