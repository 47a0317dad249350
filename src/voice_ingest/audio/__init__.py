"""
Audio handling for the ingestion pipeline.

This package sniffs attachment formats, decodes SILK voice messages,
converts audio with ffmpeg and orchestrates transcription.
"""

from .capabilities import ProviderCapabilityMatrix, default_capabilities
from .codec import DecodedAudio, SilkDecoder
from .converter import Converter
from .formats import FormatClassification, FormatSniffer, is_silk_format
from .processor import AudioProcessor
from .tempfiles import TempFileScope

__all__ = [
    "AudioProcessor",
    "Converter",
    "DecodedAudio",
    "FormatClassification",
    "FormatSniffer",
    "ProviderCapabilityMatrix",
    "SilkDecoder",
    "TempFileScope",
    "default_capabilities",
    "is_silk_format",
]
