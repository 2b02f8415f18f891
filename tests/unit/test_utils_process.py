"""Unit tests for running external commands."""

import sys
from pathlib import Path

import pytest

from github_backup_manager.utils.process import run_command


@pytest.mark.asyncio
async def test_run_command_captures_output() -> None:
    """Exit status and both output streams are returned."""
    result = await run_command([sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"])
    assert result.returncode == 3
    assert result.succeeded is False
    assert result.stdout.strip() == b"out"
    assert result.stderr.strip() == b"err"


@pytest.mark.asyncio
async def test_run_command_discards_stdout_when_asked(tmp_path: Path) -> None:
    """Stdout can be discarded while the command still runs in `cwd`."""
    result = await run_command(
        [sys.executable, "-c", "import os; print(os.getcwd()); open('marker', 'w').close()"],
        cwd=tmp_path,
        capture_stdout=False,
    )
    assert result.succeeded is True
    assert result.stdout == b""
    assert (tmp_path / "marker").exists()


@pytest.mark.asyncio
async def test_run_command_times_out() -> None:
    """A command that outlives its timeout is killed and reported."""
    with pytest.raises(TimeoutError):
        await run_command([sys.executable, "-c", "import time; time.sleep(30)"], timeout=0.2)


@pytest.mark.asyncio
async def test_run_command_missing_executable() -> None:
    """A command that cannot be started raises OSError."""
    with pytest.raises(OSError):
        await run_command(["/nonexistent/definitely-not-a-command"])
