"""Build the configured transcriber from settings."""

from typing import Optional

from ..config.settings import Settings
from ..utils.logging import get_logger
from .base import Transcriber
from .chat_completion import ChatCompletionTranscriber
from .whisper import WhisperTranscriber

logger = get_logger(__name__)


def build_transcriber(settings: Settings, provider: Optional[str] = None) -> Optional[Transcriber]:
    """Create the transcriber for ``provider`` (defaults to ``settings.provider``).

    Returns:
        Transcriber instance, or None for an unknown provider
    """
    provider = (provider or settings.provider).lower()
    config = settings.transcriber_config(provider)
    if config is None:
        logger.error("Unknown transcription provider", extra={"provider": provider})
        return None

    if provider == "alibaba":
        return ChatCompletionTranscriber(
            api_key=config.api_key,
            api_base=config.api_base,
            model=config.model,
            timeout=config.timeout,
        )

    return WhisperTranscriber(
        api_key=config.api_key,
        api_base=config.api_base,
        model=config.model,
        timeout=config.timeout,
        provider_id=provider,
    )
