"""Unit tests for the async subprocess runner."""

import asyncio
import sys

import pytest

from voice_ingest.utils.process import ProcessResult, ProcessTimeoutError, run_command


@pytest.mark.asyncio
async def test_captures_output_and_exit_code():
    result = await run_command([
        sys.executable, "-c",
        "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)",
    ])

    assert result.exit_code == 3
    assert result.stdout.strip() == "out"
    assert result.stderr.strip() == "err"
    assert result.ok is False
    assert result.output == "out\nerr"


@pytest.mark.asyncio
async def test_timeout_kills_process():
    with pytest.raises(ProcessTimeoutError):
        await run_command([sys.executable, "-c", "import time; time.sleep(30)"], timeout=0.5)


@pytest.mark.asyncio
async def test_cancellation_propagates():
    task = asyncio.create_task(run_command([sys.executable, "-c", "import time; time.sleep(30)"]))
    await asyncio.sleep(0.3)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_missing_program():
    with pytest.raises(FileNotFoundError):
        await run_command(["/nonexistent/ffmpeg", "-version"])


def test_process_result_output_skips_empty_streams():
    assert ProcessResult(exit_code=0, stdout="", stderr="only err\n").output == "only err"
    assert ProcessResult(exit_code=0, stdout="", stderr="").ok is True
