"""Audio ingestion orchestrator: detect, decode, convert, transcribe, clean up."""

import asyncio
import time
from pathlib import Path
from typing import Optional, Union

from ..errors import (
    CodecDecodeError,
    ConversionFailedError,
    EmptyResultError,
    TranscriberUnavailableError,
    VoiceIngestError,
)
from ..metrics import conversions, pipeline_errors, pipeline_runs, processing_duration
from ..transcribers.base import Transcriber, TranscriptionResult
from ..utils.logging import get_logger
from .capabilities import ProviderCapabilityMatrix, default_capabilities
from .codec import SilkDecoder
from .converter import Converter
from .formats import FormatClassification, FormatSniffer, format_sniffer
from .tempfiles import TempFileScope

logger = get_logger(__name__)

PathLike = Union[str, Path]


class AudioProcessor:
    """Turn one voice attachment into text.

    Holds only read-only collaborators, so a single instance can serve
    concurrent ``process_audio`` calls. Every intermediate file a call
    creates is deleted before that call returns; the input file is never
    touched.
    """

    def __init__(
        self,
        transcriber: Optional[Transcriber],
        capabilities: Optional[ProviderCapabilityMatrix] = None,
        converter: Optional[Converter] = None,
        decoder: Optional[SilkDecoder] = None,
        sniffer: Optional[FormatSniffer] = None,
        temp_dir: Optional[PathLike] = None,
    ):
        """Initialize processor.

        Args:
            transcriber: Speech backend; None disables the pipeline
            capabilities: Provider to accepted-extension table
            converter: ffmpeg wrapper
            decoder: SILK decoder
            sniffer: Content-based format detector
            temp_dir: Where intermediate files go; system temp dir if None
        """
        self.transcriber = transcriber
        self.capabilities = capabilities or default_capabilities
        self.converter = converter or Converter()
        self.decoder = decoder or SilkDecoder(self.converter.config.silk_sample_rate)
        self.sniffer = sniffer or format_sniffer
        self.temp_dir = Path(temp_dir) if temp_dir else None

    @property
    def provider_id(self) -> str:
        return self.transcriber.provider_id if self.transcriber is not None else ""

    def is_available(self) -> bool:
        """True if a transcriber is configured and has credentials."""
        return self.transcriber is not None and self.transcriber.is_available()

    def needs_conversion(self, audio_path: PathLike) -> bool:
        return not self.capabilities.is_format_supported(audio_path, self.provider_id)

    async def process_audio(self, audio_path: PathLike) -> str:
        """Transcribe an audio file and return its text.

        Raises:
            TranscriberUnavailableError: If no usable transcriber is configured
            VoiceIngestError: Subclass describing the failing stage
        """
        result = await self.process_audio_detailed(audio_path)
        return result.text

    async def process_audio_detailed(self, audio_path: PathLike) -> TranscriptionResult:
        """Like :meth:`process_audio` but return language and duration too."""
        if not self.is_available():
            raise TranscriberUnavailableError("transcriber not available")

        provider = self.provider_id
        start_time = time.monotonic()

        try:
            with TempFileScope(self.temp_dir) as scope:
                final_path = await self._prepare(Path(audio_path), provider, scope)
                result = await self.transcriber.transcribe(final_path)

            if not result.text or not result.text.strip():
                raise EmptyResultError()

        except VoiceIngestError as e:
            pipeline_errors.labels(stage=e.stage, error_type=type(e).__name__).inc()
            pipeline_runs.labels(provider=provider, outcome="error").inc()
            logger.error(
                "Audio processing failed",
                extra={"path": str(audio_path), "provider": provider, "stage": e.stage, "error": str(e)},
            )
            raise
        except asyncio.CancelledError:
            pipeline_runs.labels(provider=provider, outcome="cancelled").inc()
            raise

        elapsed = time.monotonic() - start_time
        processing_duration.labels(provider=provider).observe(elapsed)
        pipeline_runs.labels(provider=provider, outcome="success").inc()
        logger.info(
            "Audio processed",
            extra={"path": str(audio_path), "provider": provider, "processing_time": round(elapsed, 3)},
        )
        return result

    async def _prepare(self, audio_path: Path, provider: str, scope: TempFileScope) -> Path:
        """Return a path the backend accepts, converting into ``scope`` if needed."""
        if self.capabilities.is_format_supported(audio_path, provider):
            return audio_path

        logger.info(
            "Audio format not supported, converting",
            extra={"path": str(audio_path), "provider": provider},
        )
        self.converter.ensure_available()

        if self.sniffer.classify(audio_path) is FormatClassification.PROPRIETARY_CODEC:
            logger.info("Detected SILK format, converting to WAV first", extra={"input": str(audio_path)})
            wav_path = await self._silk_to_wav(audio_path, scope)
            if self.capabilities.is_format_supported(wav_path, provider):
                return wav_path
            return await self._to_mp3(wav_path, audio_path, scope)

        return await self._to_mp3(audio_path, audio_path, scope)

    async def _silk_to_wav(self, audio_path: Path, scope: TempFileScope) -> Path:
        try:
            data = await asyncio.to_thread(audio_path.read_bytes)
        except OSError as e:
            raise CodecDecodeError(f"failed to read file: {e}") from e

        decoded = await self.decoder.decode_async(data)

        pcm_path = scope.new_path(audio_path, ".pcm")
        try:
            await asyncio.to_thread(pcm_path.write_bytes, decoded.pcm)
        except OSError as e:
            raise ConversionFailedError(f"failed to write PCM file: {e}") from e

        wav_path = scope.new_path(audio_path, ".wav")
        await self.converter.pcm_to_wav(pcm_path, wav_path, decoded.sample_rate)
        conversions.labels(mode="pcm_to_wav").inc()
        return wav_path

    async def _to_mp3(self, input_path: Path, source: Path, scope: TempFileScope) -> Path:
        mp3_path = scope.new_path(source, ".mp3")
        await self.converter.to_mp3(input_path, mp3_path)
        conversions.labels(mode="to_mp3").inc()
        return mp3_path
