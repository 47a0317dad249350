"""Unit tests for the ffmpeg Converter."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from voice_ingest.audio.converter import Converter
from voice_ingest.config.settings import ConversionConfig
from voice_ingest.errors import ConversionFailedError, ConversionUnavailableError
from voice_ingest.utils.process import ProcessResult, ProcessTimeoutError


@pytest.fixture
def converter():
    conv = Converter(ConversionConfig())
    conv._ffmpeg_path = "/usr/bin/ffmpeg"
    conv._checked = True
    return conv


def ffmpeg_writes_output(exit_code=0, stderr=""):
    """run_command stand-in that creates the last argument as ffmpeg would."""
    async def _run(args, timeout=None):
        if exit_code == 0:
            Path(args[-1]).write_bytes(b"audio")
        return ProcessResult(exit_code=exit_code, stdout="", stderr=stderr)
    return AsyncMock(side_effect=_run)


class TestArguments:
    """Exact ffmpeg parameters."""

    def test_pcm_to_wav_args(self, converter):
        args = converter.pcm_to_wav_args("in.pcm", "out.wav", 24000)
        assert args == ["-y", "-f", "s16le", "-ar", "24000", "-ac", "1", "-i", "in.pcm", "out.wav"]

    def test_to_mp3_args(self, converter):
        args = converter.to_mp3_args("in.amr", "out.mp3")
        assert args == [
            "-y", "-i", "in.amr", "-vn",
            "-ar", "16000", "-ac", "1",
            "-acodec", "libmp3lame", "-q:a", "2",
            "out.mp3",
        ]

    def test_custom_parameters(self):
        conv = Converter(ConversionConfig(target_sample_rate=24000, mp3_quality=4))
        args = conv.to_mp3_args("a", "b")
        assert args[args.index("-ar") + 1] == "24000"
        assert args[args.index("-q:a") + 1] == "4"


class TestAvailability:
    """ffmpeg lookup."""

    def test_missing_ffmpeg(self):
        conv = Converter(ConversionConfig(ffmpeg_bin="definitely-not-ffmpeg"))
        with patch("voice_ingest.audio.converter.shutil.which", return_value=None):
            with pytest.raises(ConversionUnavailableError):
                conv.ensure_available()
            assert conv.is_available() is False

    def test_lookup_is_cached(self):
        conv = Converter()
        with patch("voice_ingest.audio.converter.shutil.which", return_value="/opt/ffmpeg") as which:
            assert conv.ensure_available() == "/opt/ffmpeg"
            assert conv.ensure_available() == "/opt/ffmpeg"
            assert conv.is_available()
        which.assert_called_once_with("ffmpeg")

    def test_missing_result_is_cached(self):
        conv = Converter()
        with patch("voice_ingest.audio.converter.shutil.which", return_value=None) as which:
            for _ in range(3):
                with pytest.raises(ConversionUnavailableError):
                    conv.ensure_available()
            assert conv.is_available() is False
        which.assert_called_once_with("ffmpeg")


class TestRun:
    """Conversion execution and failure wrapping."""

    @pytest.mark.asyncio
    async def test_pcm_to_wav_success(self, converter, tmp_path):
        out = tmp_path / "voice.wav"
        runner = ffmpeg_writes_output()

        with patch("voice_ingest.audio.converter.run_command", runner):
            result = await converter.pcm_to_wav(tmp_path / "voice.pcm", out, 24000)

        assert result == out
        args = runner.call_args.args[0]
        assert args[0] == "/usr/bin/ffmpeg"
        assert args[1:] == converter.pcm_to_wav_args(tmp_path / "voice.pcm", out, 24000)
        assert runner.call_args.kwargs["timeout"] == converter.config.timeout_seconds

    @pytest.mark.asyncio
    async def test_nonzero_exit_carries_diagnostics(self, converter, tmp_path):
        runner = ffmpeg_writes_output(exit_code=1, stderr="Invalid data found when processing input")

        with patch("voice_ingest.audio.converter.run_command", runner):
            with pytest.raises(ConversionFailedError) as exc_info:
                await converter.to_mp3(tmp_path / "in.amr", tmp_path / "out.mp3")

        assert exc_info.value.exit_code == 1
        assert "Invalid data found" in exc_info.value.output
        assert "Invalid data found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_output_is_failure(self, converter, tmp_path):
        runner = AsyncMock(return_value=ProcessResult(exit_code=0, stdout="", stderr=""))

        with patch("voice_ingest.audio.converter.run_command", runner):
            with pytest.raises(ConversionFailedError):
                await converter.to_mp3(tmp_path / "in.amr", tmp_path / "out.mp3")

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self, converter, tmp_path):
        runner = AsyncMock(side_effect=ProcessTimeoutError(["ffmpeg"], 1.0))

        with patch("voice_ingest.audio.converter.run_command", runner):
            with pytest.raises(ConversionFailedError) as exc_info:
                await converter.to_mp3(tmp_path / "in.amr", tmp_path / "out.mp3")

        assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_os_error_is_failure(self, converter, tmp_path):
        runner = AsyncMock(side_effect=PermissionError("not executable"))

        with patch("voice_ingest.audio.converter.run_command", runner):
            with pytest.raises(ConversionFailedError):
                await converter.to_mp3(tmp_path / "in.amr", tmp_path / "out.mp3")

    @pytest.mark.asyncio
    async def test_unavailable_before_running(self, tmp_path):
        conv = Converter()
        runner = AsyncMock()

        with patch("voice_ingest.audio.converter.shutil.which", return_value=None), \
                patch("voice_ingest.audio.converter.run_command", runner):
            with pytest.raises(ConversionUnavailableError):
                await conv.to_mp3(tmp_path / "in.amr", tmp_path / "out.mp3")

        runner.assert_not_called()
