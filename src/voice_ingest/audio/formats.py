"""Content-based audio format detection."""

from enum import Enum
from pathlib import Path
from typing import Protocol, Union

from ..errors import DetectionIOError
from ..utils.logging import get_logger

logger = get_logger(__name__)

SILK_MARKER = b"#!SILK_V3"
# QQ prepends one framing byte to the standard SILK container
SILK_FRAME_PREFIX = 0x02
MIN_SNIFF_BYTES = 10


class FormatClassification(str, Enum):
    """What a file's content says it is."""

    PROPRIETARY_CODEC = "silk"
    GENERIC = "generic"


class AudioFormatHandler(Protocol):
    """Protocol for content sniffers."""

    classification: FormatClassification

    def can_handle(self, audio_data: bytes) -> bool:
        """Check if this handler recognises the audio data."""
        ...


class SilkHandler:
    """SILK v3 detector, with or without the QQ framing byte."""

    classification = FormatClassification.PROPRIETARY_CODEC

    def can_handle(self, audio_data: bytes) -> bool:
        if len(audio_data) < MIN_SNIFF_BYTES:
            return False
        if audio_data[0] == SILK_FRAME_PREFIX and audio_data[1:10] == SILK_MARKER:
            return True
        return audio_data[:9] == SILK_MARKER


class FormatSniffer:
    """Classify audio files by their leading bytes, never by extension."""

    def __init__(self):
        self.handlers = {
            "silk": SilkHandler(),
        }

    def sniff_bytes(self, audio_data: bytes) -> FormatClassification:
        """Classify an in-memory buffer."""
        for name, handler in self.handlers.items():
            if handler.can_handle(audio_data):
                logger.debug(f"Detected {name.upper()} format")
                return handler.classification
        return FormatClassification.GENERIC

    def sniff_file(self, path: Union[str, Path]) -> FormatClassification:
        """Classify a file on disk.

        Raises:
            DetectionIOError: If the file cannot be read
        """
        try:
            with open(path, "rb") as f:
                head = f.read(MIN_SNIFF_BYTES)
        except OSError as e:
            raise DetectionIOError(f"failed to read {path}: {e}") from e
        return self.sniff_bytes(head)

    def classify(self, path: Union[str, Path]) -> FormatClassification:
        """Classify a file; unreadable files are logged and reported as generic."""
        try:
            return self.sniff_file(path)
        except DetectionIOError as e:
            logger.warning(
                "Format detection failed, assuming generic audio",
                extra={"path": str(path), "error": str(e)},
            )
            return FormatClassification.GENERIC


format_sniffer = FormatSniffer()


def is_silk_format(path: Union[str, Path]) -> bool:
    """Return True if the file at ``path`` holds SILK v3 audio."""
    return format_sniffer.classify(path) is FormatClassification.PROPRIETARY_CODEC
