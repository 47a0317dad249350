"""Transcriber interface shared by all speech backends."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiohttp

from ..errors import VoiceIngestError, Stage
from ..utils.logging import get_logger

logger = get_logger(__name__)

PathLike = Union[str, Path]


class AudioFileError(VoiceIngestError):
    """Audio file handed to a transcriber could not be read."""

    stage = Stage.TRANSCRIPTION
    code = "audio_file_error"


@dataclass
class TranscriptionResult:
    """Text returned by a speech backend."""

    text: str
    language: Optional[str] = None
    duration_seconds: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "language": self.language,
            "duration": self.duration_seconds,
        }


def truncate(text: str, limit: int = 50) -> str:
    """Shorten ``text`` for log previews."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class Transcriber(ABC):
    """Remote speech-to-text backend.

    ``provider_id`` tells the orchestrator which capability row applies, so
    it never has to inspect the concrete class.
    """

    provider_id: str = ""

    def __init__(self, api_key: str, api_base: str, model: str, timeout: float):
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.model = model
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

        logger.debug(
            f"Creating {self.provider_id} transcriber",
            extra={"has_api_key": bool(api_key), "api_base": self.api_base, "model": model},
        )

    @abstractmethod
    async def transcribe(self, audio_path: PathLike) -> TranscriptionResult:
        """Transcribe the audio file at ``audio_path``."""

    def is_available(self) -> bool:
        """True when credentials are configured. Never touches the network."""
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    @staticmethod
    async def _read_audio(audio_path: PathLike) -> bytes:
        try:
            return await asyncio.to_thread(Path(audio_path).read_bytes)
        except OSError as e:
            logger.error("Failed to open audio file", extra={"path": str(audio_path), "error": str(e)})
            raise AudioFileError(f"failed to open audio file: {e}") from e

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
