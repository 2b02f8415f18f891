"""Runs external commands from the event loop."""

import asyncio
from dataclasses import dataclass
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of a finished command."""

    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def succeeded(self) -> bool:
        """Whether the command exited with status zero."""
        return self.returncode == 0


async def run_command(
    argv: list[str],
    cwd: Path | None = None,
    timeout: float | None = None,
    capture_stdout: bool = True,
) -> CommandResult:
    """Run `argv` to completion and return its result.

    Raises OSError, or ValueError for arguments such as embedded null bytes,
    if the process cannot be started, and TimeoutError if it
    does not finish within `timeout` seconds, in which case it is killed
    first. A `timeout` of None waits indefinitely.
    """
    logger.debug("Running command", command=" ".join(argv), cwd=str(cwd) if cwd else None)
    process = await asyncio.create_subprocess_exec(
        *argv,
        cwd=cwd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE if capture_stdout else asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise TimeoutError(f"Command '{argv[0]}' did not finish within {timeout} seconds") from None
    return CommandResult(returncode=process.returncode if process.returncode is not None else -1, stdout=stdout or b"", stderr=stderr or b"")
