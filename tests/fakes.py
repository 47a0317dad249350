"""Test doubles for the pipeline's external capabilities."""

import asyncio
from pathlib import Path
from typing import List, Optional

from voice_ingest.audio.codec import DecodedAudio, SilkDecoder
from voice_ingest.audio.converter import Converter
from voice_ingest.errors import ConversionFailedError, ConversionUnavailableError
from voice_ingest.transcribers.base import Transcriber, TranscriptionResult


class FakeTranscriber(Transcriber):
    """Transcriber double that records which files it was given."""

    def __init__(
        self,
        provider_id: str = "groq",
        text: str = "Hello world",
        available: bool = True,
        error: Optional[Exception] = None,
        block: bool = False,
    ):
        self.provider_id = provider_id
        super().__init__(api_key="test-key" if available else "", api_base="http://fake", model="fake", timeout=5)
        self.text = text
        self.error = error
        self.block = block
        self.calls: List[Path] = []
        self.existed_at_call: List[bool] = []
        self.entered = asyncio.Event()

    async def transcribe(self, audio_path) -> TranscriptionResult:
        path = Path(audio_path)
        self.calls.append(path)
        self.existed_at_call.append(path.exists())
        self.entered.set()
        if self.block:
            await asyncio.Event().wait()
        if self.error is not None:
            raise self.error
        return TranscriptionResult(text=self.text, language="en", duration_seconds=1.5)


class FakeConverter(Converter):
    """Converter double that writes placeholder output instead of running ffmpeg."""

    def __init__(self, available: bool = True, fail_mode: Optional[str] = None):
        super().__init__()
        self.available = available
        self.fail_mode = fail_mode
        self.calls: List[tuple] = []

    def ensure_available(self) -> str:
        if not self.available:
            raise ConversionUnavailableError("ffmpeg not found in PATH: ffmpeg")
        return "/usr/bin/ffmpeg"

    async def pcm_to_wav(self, pcm_path, output_path, sample_rate):
        self.calls.append(("pcm_to_wav", Path(pcm_path), Path(output_path), sample_rate))
        return self._write(output_path, "pcm_to_wav")

    async def to_mp3(self, input_path, output_path):
        self.calls.append(("to_mp3", Path(input_path), Path(output_path)))
        return self._write(output_path, "to_mp3")

    def _write(self, output_path, mode):
        output_path = Path(output_path)
        # Leave a partial file behind on failure, like a crashed ffmpeg would
        output_path.write_bytes(b"converted")
        if self.fail_mode == mode:
            raise ConversionFailedError("ffmpeg exited with status 1", output="Invalid data found", exit_code=1)
        return output_path


class FakeDecoder(SilkDecoder):
    """Decoder double returning a fixed PCM buffer."""

    def __init__(self, sample_rate: int = 24000, error: Optional[Exception] = None):
        super().__init__(sample_rate)
        self.error = error
        self.inputs: List[bytes] = []

    def decode(self, data: bytes) -> DecodedAudio:
        self.inputs.append(data)
        if self.error is not None:
            raise self.error
        return DecodedAudio(pcm=b"\x00\x01" * 2400, sample_rate=self.sample_rate)


