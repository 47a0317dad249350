"""Async subprocess invocation with a structured result."""

import asyncio
from dataclasses import dataclass
from typing import Optional, Sequence

from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one external command."""

    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for diagnostics."""
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


class ProcessTimeoutError(Exception):
    """Raised when a command exceeds its deadline. The process is killed."""

    def __init__(self, args: Sequence[str], timeout: float):
        super().__init__(f"{args[0]} timed out after {timeout}s")
        self.timeout = timeout


async def run_command(args: Sequence[str], timeout: Optional[float] = None) -> ProcessResult:
    """Run ``args`` without a shell and capture its output.

    The child is killed if the deadline passes or the awaiting task is
    cancelled; cancellation is re-raised after the kill.

    Args:
        args: Program and arguments
        timeout: Deadline in seconds, ``None`` for no limit

    Returns:
        ProcessResult with exit code and decoded output

    Raises:
        FileNotFoundError: If the program does not exist
        ProcessTimeoutError: If the deadline passes
    """
    logger.debug("Running command", extra={"command": " ".join(args)})

    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill(proc)
        raise ProcessTimeoutError(args, timeout)
    except asyncio.CancelledError:
        await _kill(proc)
        raise

    return ProcessResult(
        exit_code=proc.returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        return
    await proc.wait()
