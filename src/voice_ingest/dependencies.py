"""FastAPI dependency injection providers.

Shared instances are created lazily once per process and handed to the
routes through ``Depends()``, so tests can swap them with
``app.dependency_overrides``.
"""

from typing import Optional

from .audio.capabilities import default_capabilities
from .audio.codec import SilkDecoder
from .audio.converter import Converter
from .audio.processor import AudioProcessor
from .config.loader import load_config
from .config.settings import Settings
from .transcribers.factory import build_transcriber
from .utils.logging import get_logger

logger = get_logger(__name__)


_settings: Optional[Settings] = None
_audio_processor: Optional[AudioProcessor] = None


def get_settings() -> Settings:
    """Get application settings (loaded once)."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def set_settings(settings: Settings) -> None:
    """Install settings loaded elsewhere (e.g. by ``create_app``)."""
    global _settings, _audio_processor
    _settings = settings
    _audio_processor = None


def build_audio_processor(settings: Settings) -> AudioProcessor:
    """Wire the pipeline from configuration."""
    converter = Converter(settings.conversion)
    return AudioProcessor(
        transcriber=build_transcriber(settings),
        capabilities=default_capabilities,
        converter=converter,
        decoder=SilkDecoder(settings.conversion.silk_sample_rate),
        temp_dir=settings.temp_dir,
    )


def get_audio_processor() -> AudioProcessor:
    """Get or create the audio processor (singleton).

    Returns:
        AudioProcessor for the configured provider
    """
    global _audio_processor
    if _audio_processor is None:
        settings = get_settings()
        logger.info("Initializing audio processor", extra={"provider": settings.provider})
        _audio_processor = build_audio_processor(settings)
    return _audio_processor


async def close_audio_processor() -> None:
    """Release the transcriber's HTTP session."""
    global _audio_processor
    if _audio_processor is not None and _audio_processor.transcriber is not None:
        await _audio_processor.transcriber.close()
    _audio_processor = None
