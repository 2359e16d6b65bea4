"""
Process Executor - runs one kubectl invocation with a bounded timeout.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional

from kubeactions.modules.commands import CommandSpec
from kubeactions.modules.errors import CommandTimeoutError, SpawnError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Captured result of a finished process."""

    exit_code: int
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class ProcessExecutor:
    """Spawns a fresh child process per call; nothing is shared between calls."""

    def __init__(self, default_timeout: float = 30.0):
        """
        Initialize executor.

        Args:
            default_timeout: Seconds allowed per process when run() gets no timeout
        """
        self.default_timeout = default_timeout

    async def run(
        self, spec: CommandSpec, timeout: Optional[float] = None
    ) -> ExecutionResult:
        """
        Execute a command spec.

        A non-zero exit code is returned, not raised; the orchestrator decides
        what it means. If the calling task is cancelled the child is killed
        before the cancellation propagates.

        Args:
            spec: Command to run (never passed through a shell)
            timeout: Seconds before the process is killed

        Returns:
            ExecutionResult with decoded stdout/stderr

        Raises:
            SpawnError: Binary missing or not executable
            CommandTimeoutError: Process exceeded the timeout
        """
        timeout = self.default_timeout if timeout is None else timeout
        command_str = spec.display()
        logger.debug(f"Running: {command_str}")

        start_time = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                *spec.argv,
                stdin=asyncio.subprocess.PIPE
                if spec.stdin is not None
                else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(spec.cwd) if spec.cwd else None,
            )
        except OSError as e:
            logger.error(f"Failed to launch {spec.binary}: {e}")
            raise SpawnError(f"Failed to launch {spec.binary}: {e}") from e

        stdin_data = spec.stdin.encode() if spec.stdin is not None else None
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(stdin_data), timeout=timeout
            )
        except asyncio.TimeoutError:
            await self._kill(process)
            logger.error(f"Command timed out after {timeout}s: {command_str}")
            raise CommandTimeoutError(
                f"Command timed out after {timeout}s: {command_str}", timeout
            )
        except asyncio.CancelledError:
            logger.warning(f"Command cancelled, killing process: {command_str}")
            await self._kill(process)
            raise

        result = ExecutionResult(
            exit_code=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        logger.debug(
            f"Command finished with code {result.exit_code} in {result.duration_ms}ms"
        )
        return result

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
