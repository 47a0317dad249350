"""Chat-completion style transcription (DashScope Qwen3-ASR).

The audio travels base64-encoded inside an ``input_audio`` content block of
an OpenAI-compatible ``/chat/completions`` request.
"""

import asyncio
import base64
import json
from pathlib import Path
from typing import Any, Dict

import aiohttp

from ..errors import BackendError, EmptyResultError
from ..utils.logging import get_logger
from .base import PathLike, Transcriber, TranscriptionResult, truncate

logger = get_logger(__name__)

DASHSCOPE_API_BASE = "https://dashscope.aliyuncs.com/compatible-mode/v1"
DASHSCOPE_MODEL = "qwen3-asr-flash"

_MIME_SUBTYPES = {
    ".mp3": "mp3",
    ".wav": "wav",
    ".flac": "flac",
    ".m4a": "m4a",
    ".ogg": "ogg",
    ".webm": "webm",
    ".amr": "amr",
}


def audio_mime_subtype(audio_path: PathLike) -> str:
    """MIME sub-type for the data URI; unknown extensions fall back to mp3."""
    return _MIME_SUBTYPES.get(Path(audio_path).suffix.lower(), "mp3")


class ChatCompletionTranscriber(Transcriber):
    """Synchronous ASR through ``{api_base}/chat/completions``."""

    provider_id = "alibaba"

    def __init__(
        self,
        api_key: str,
        api_base: str = DASHSCOPE_API_BASE,
        model: str = DASHSCOPE_MODEL,
        timeout: float = 120.0,
    ):
        super().__init__(api_key, api_base, model, timeout)

    @property
    def url(self) -> str:
        return f"{self.api_base}/chat/completions"

    def build_payload(self, audio_bytes: bytes, audio_path: PathLike) -> Dict[str, Any]:
        data_uri = "data:audio/{};base64,{}".format(
            audio_mime_subtype(audio_path),
            base64.b64encode(audio_bytes).decode("ascii"),
        )
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "input_audio",
                            "input_audio": {"data": data_uri},
                        }
                    ],
                }
            ],
        }

    async def transcribe(self, audio_path: PathLike) -> TranscriptionResult:
        logger.info(
            "Starting transcription",
            extra={"audio_file": str(audio_path), "provider": self.provider_id, "model": self.model},
        )

        audio_bytes = await self._read_audio(audio_path)
        payload = self.build_payload(audio_bytes, audio_path)

        logger.debug(
            "Sending transcription request",
            extra={"url": self.url, "model": self.model, "audio_size": len(audio_bytes)},
        )

        try:
            session = await self._get_session()
            async with session.post(self.url, json=payload, headers=self._headers()) as response:
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
            chat_response = json.loads(body)
        except json.JSONDecodeError as e:
            logger.error("Failed to unmarshal response", extra={"error": str(e), "response": body})
            raise BackendError(f"failed to unmarshal response: {e}", status=status, body=body) from e

        text = self._first_choice_content(chat_response)
        if not text:
            logger.error("Empty transcription result", extra={"response": body})
            raise EmptyResultError(body=body)

        logger.info(
            "Transcription completed successfully",
            extra={"text_length": len(text), "transcription_preview": truncate(text, 50)},
        )
        return TranscriptionResult(text=text)

    @staticmethod
    def _first_choice_content(chat_response: Any) -> str:
        """Text of the first choice, or '' for any other response shape."""
        if not isinstance(chat_response, dict):
            return ""
        choices = chat_response.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""
        message = choices[0].get("message")
        if not isinstance(message, dict):
            return ""
        content = message.get("content")
        if not isinstance(content, str):
            return ""
        return content.strip()
