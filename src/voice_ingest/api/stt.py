"""Speech-to-Text API endpoints."""

import asyncio
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from ..audio.processor import AudioProcessor
from ..audio.tempfiles import TempFileScope
from ..config.settings import Settings
from ..dependencies import get_audio_processor, get_settings
from ..errors import (
    BackendError,
    CodecDecodeError,
    ConversionUnavailableError,
    EmptyResultError,
    TranscriberUnavailableError,
    VoiceIngestError,
)
from ..utils.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


class TranscriptionResponse(BaseModel):
    """STT transcription response model."""
    text: str = Field(..., description="Transcribed text")
    language: Optional[str] = Field(None, description="Detected language code")
    duration: Optional[float] = Field(None, description="Audio duration in seconds, if reported")
    provider: str = Field(..., description="Backend that produced the text")
    processing_time: float = Field(..., description="Processing time in seconds")


class ProviderStatus(BaseModel):
    """Active backend and what it accepts."""
    provider: str
    available: bool
    accepted_extensions: List[str]


def error_status_code(error: VoiceIngestError) -> int:
    """Map a pipeline error to an HTTP status code."""
    if isinstance(error, (TranscriberUnavailableError, ConversionUnavailableError)):
        return 503
    if isinstance(error, CodecDecodeError):
        return 422
    if isinstance(error, (BackendError, EmptyResultError)):
        return 502
    return 500


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe_upload(
    file: UploadFile = File(..., description="Audio file to transcribe"),
    processor: AudioProcessor = Depends(get_audio_processor),
    settings: Settings = Depends(get_settings),
) -> TranscriptionResponse:
    """Transcribe an uploaded voice message.

    The upload is stored under its original extension so the capability
    check sees the same name a chat attachment would have, then removed
    whatever the outcome.
    """
    start_time = time.time()
    filename = Path(file.filename or "upload").name

    if not processor.is_available():
        error = TranscriberUnavailableError("transcriber not available")
        raise HTTPException(status_code=503, detail=error.to_dict())

    with TempFileScope(settings.temp_dir) as scope:
        upload_path = scope.new_path(filename, Path(filename).suffix)
        audio_bytes = await file.read()
        await asyncio.to_thread(upload_path.write_bytes, audio_bytes)

        logger.info(
            "Processing upload",
            extra={"file_name": filename, "size_bytes": len(audio_bytes), "provider": processor.provider_id},
        )

        try:
            result = await asyncio.wait_for(
                processor.process_audio_detailed(upload_path),
                timeout=settings.api.request_timeout,
            )
        except VoiceIngestError as e:
            raise HTTPException(status_code=error_status_code(e), detail=e.to_dict())
        except asyncio.TimeoutError:
            raise HTTPException(
                status_code=504,
                detail={"error": "timeout", "stage": "", "detail": "audio processing timed out"},
            )

    return TranscriptionResponse(
        text=result.text,
        language=result.language,
        duration=result.duration_seconds,
        provider=processor.provider_id,
        processing_time=time.time() - start_time,
    )


@router.get("/status", response_model=ProviderStatus)
async def provider_status(processor: AudioProcessor = Depends(get_audio_processor)) -> ProviderStatus:
    """Report the active provider without contacting it."""
    provider = processor.provider_id
    return ProviderStatus(
        provider=provider,
        available=processor.is_available(),
        accepted_extensions=sorted(processor.capabilities.accepted_extensions(provider)),
    )


@router.get("/health")
async def stt_health(processor: AudioProcessor = Depends(get_audio_processor)) -> Dict[str, Any]:
    """Check STT endpoint health."""
    return {
        "status": "healthy" if processor.is_available() else "unavailable",
        "provider": processor.provider_id,
        "ffmpeg": processor.converter.is_available(),
    }
