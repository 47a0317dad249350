"""SILK v3 decoding via silk-python."""

import asyncio
import io
from dataclasses import dataclass

import pysilk

from ..errors import CodecDecodeError
from ..utils.logging import get_logger
from .formats import SILK_FRAME_PREFIX

logger = get_logger(__name__)

DEFAULT_SILK_SAMPLE_RATE = 24000


@dataclass(frozen=True)
class DecodedAudio:
    """Raw PCM produced by the decoder: signed 16-bit little-endian."""

    pcm: bytes
    sample_rate: int
    channels: int = 1
    sample_width: int = 2

    @property
    def duration(self) -> float:
        frame_size = self.channels * self.sample_width
        return len(self.pcm) / (self.sample_rate * frame_size)


class SilkDecoder:
    """Decode SILK v3 payloads (as sent by QQ/WeChat) into PCM."""

    def __init__(self, sample_rate: int = DEFAULT_SILK_SAMPLE_RATE):
        """Initialize decoder.

        Args:
            sample_rate: Output PCM sample rate in Hz
        """
        self.sample_rate = sample_rate

    @staticmethod
    def strip_frame_prefix(data: bytes) -> bytes:
        """Drop the one-byte QQ framing prefix, if present."""
        if data and data[0] == SILK_FRAME_PREFIX:
            return data[1:]
        return data

    def decode(self, data: bytes) -> DecodedAudio:
        """Decode a SILK file's bytes.

        Args:
            data: Full file content, optionally starting with the 0x02 prefix

        Returns:
            DecodedAudio at ``self.sample_rate``, mono 16-bit

        Raises:
            CodecDecodeError: If the payload cannot be decoded
        """
        silk_data = self.strip_frame_prefix(data)
        pcm_out = io.BytesIO()

        try:
            pysilk.decode(io.BytesIO(silk_data), pcm_out, self.sample_rate)
        except Exception as e:
            raise CodecDecodeError(f"failed to decode SILK: {e}") from e

        pcm = pcm_out.getvalue()
        if not pcm:
            raise CodecDecodeError("failed to decode SILK: decoder produced no samples")

        decoded = DecodedAudio(pcm=pcm, sample_rate=self.sample_rate)
        logger.info(
            "Decoded SILK audio",
            extra={
                "input_bytes": len(data),
                "pcm_bytes": len(pcm),
                "sample_rate": decoded.sample_rate,
                "duration": round(decoded.duration, 3),
            },
        )
        return decoded

    async def decode_async(self, data: bytes) -> DecodedAudio:
        """Decode in a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.decode, data)
