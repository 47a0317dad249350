"""Whisper-style transcription over the OpenAI-compatible audio endpoint.

Groq and OpenAI both expose ``POST /audio/transcriptions`` taking a
multipart upload; only the base URL, model and accepted formats differ.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import aiohttp

from ..errors import BackendError, EmptyResultError
from ..utils.logging import get_logger
from .base import PathLike, Transcriber, TranscriptionResult, truncate

logger = get_logger(__name__)

GROQ_API_BASE = "https://api.groq.com/openai/v1"
GROQ_MODEL = "whisper-large-v3"
OPENAI_API_BASE = "https://api.openai.com/v1"
OPENAI_MODEL = "whisper-1"


class WhisperTranscriber(Transcriber):
    """Multipart upload to ``{api_base}/audio/transcriptions``."""

    provider_id = "groq"

    def __init__(
        self,
        api_key: str,
        api_base: str = GROQ_API_BASE,
        model: str = GROQ_MODEL,
        timeout: float = 60.0,
        provider_id: Optional[str] = None,
    ):
        """Initialize transcriber.

        Args:
            api_key: Bearer token
            api_base: API root, without trailing slash
            model: Whisper model name
            timeout: Total request timeout in seconds
            provider_id: Capability row to use; defaults to ``groq``
        """
        if provider_id:
            self.provider_id = provider_id
        super().__init__(api_key, api_base, model, timeout)

    @property
    def url(self) -> str:
        return f"{self.api_base}/audio/transcriptions"

    async def transcribe(self, audio_path: PathLike) -> TranscriptionResult:
        logger.info("Starting transcription", extra={"audio_file": str(audio_path), "provider": self.provider_id})

        audio_bytes = await self._read_audio(audio_path)
        file_name = Path(audio_path).name

        form = aiohttp.FormData()
        form.add_field("file", audio_bytes, filename=file_name, content_type="application/octet-stream")
        form.add_field("model", self.model)
        form.add_field("response_format", "json")

        logger.debug(
            "Sending transcription request",
            extra={"url": self.url, "file_size_bytes": len(audio_bytes), "file_name": file_name},
        )

        try:
            session = await self._get_session()
            async with session.post(self.url, data=form, headers=self._headers()) as response:
                status = response.status
                body = await response.text()
        except asyncio.TimeoutError as e:
            logger.error("Transcription request timed out", extra={"url": self.url})
            raise BackendError(f"request to {self.url} timed out") from e
        except aiohttp.ClientError as e:
            logger.error("Failed to send request", extra={"url": self.url, "error": str(e)})
            raise BackendError(f"failed to send request: {e}") from e

        if not 200 <= status < 300:
            logger.error("API error", extra={"status_code": status, "response": body})
            raise BackendError("API error", status=status, body=body)

        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            logger.error("Failed to unmarshal response", extra={"error": str(e)})
            raise BackendError(f"failed to unmarshal response: {e}", status=status, body=body) from e

        text = (payload.get("text") or "").strip() if isinstance(payload, dict) else ""
        if not text:
            logger.error("Empty transcription result", extra={"response": body})
            raise EmptyResultError(body=body)

        language = payload.get("language")
        duration = payload.get("duration")
        result = TranscriptionResult(
            text=text,
            language=language if isinstance(language, str) and language else None,
            duration_seconds=_as_seconds(duration),
        )

        logger.info(
            "Transcription completed successfully",
            extra={
                "text_length": len(result.text),
                "language": result.language,
                "duration_seconds": result.duration_seconds,
                "transcription_preview": truncate(result.text, 50),
            },
        )
        return result


def _as_seconds(value) -> Optional[float]:
    """Reported duration as float; anything non-numeric becomes None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def groq_transcriber(api_key: str, api_base: str = GROQ_API_BASE, model: str = GROQ_MODEL,
                     timeout: float = 60.0) -> WhisperTranscriber:
    return WhisperTranscriber(api_key, api_base, model, timeout, provider_id="groq")


def openai_transcriber(api_key: str, api_base: str = OPENAI_API_BASE, model: str = OPENAI_MODEL,
                       timeout: float = 60.0) -> WhisperTranscriber:
    return WhisperTranscriber(api_key, api_base, model, timeout, provider_id="openai")
