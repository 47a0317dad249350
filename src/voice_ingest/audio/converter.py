"""ffmpeg-backed audio conversion."""

import shutil
import threading
from pathlib import Path
from typing import List, Optional, Union

from ..config.settings import ConversionConfig
from ..errors import ConversionFailedError, ConversionUnavailableError
from ..utils.logging import get_logger
from ..utils.process import ProcessResult, ProcessTimeoutError, run_command

logger = get_logger(__name__)

PathLike = Union[str, Path]


class Converter:
    """Run ffmpeg with the exact parameters the speech backends expect."""

    def __init__(self, config: Optional[ConversionConfig] = None):
        """Initialize converter.

        Args:
            config: Conversion parameters; defaults are 16 kHz mono MP3 at
                libmp3lame quality 2 and 24 kHz input PCM
        """
        self.config = config or ConversionConfig()
        self._ffmpeg_path: Optional[str] = None
        self._checked = False
        self._lock = threading.Lock()

    def ensure_available(self) -> str:
        """Resolve the ffmpeg binary once and cache the outcome.

        A missing binary is remembered too; installing ffmpeg later needs a
        new Converter.

        Returns:
            Absolute path to ffmpeg

        Raises:
            ConversionUnavailableError: If ffmpeg is not found
        """
        if not self._checked:
            with self._lock:
                if not self._checked:
                    self._ffmpeg_path = shutil.which(self.config.ffmpeg_bin)
                    self._checked = True
                    if self._ffmpeg_path is None:
                        logger.warning("ffmpeg not found", extra={"ffmpeg": self.config.ffmpeg_bin})
                    else:
                        logger.info("Using ffmpeg", extra={"ffmpeg": self._ffmpeg_path})

        if self._ffmpeg_path is None:
            raise ConversionUnavailableError(f"ffmpeg not found in PATH: {self.config.ffmpeg_bin}")
        return self._ffmpeg_path

    def is_available(self) -> bool:
        try:
            self.ensure_available()
        except ConversionUnavailableError:
            return False
        return True

    def pcm_to_wav_args(self, pcm_path: PathLike, output_path: PathLike, sample_rate: int) -> List[str]:
        """ffmpeg arguments for raw s16le PCM to WAV at the same rate."""
        return [
            "-y",
            "-f", "s16le",
            "-ar", str(sample_rate),
            "-ac", str(self.config.channels),
            "-i", str(pcm_path),
            str(output_path),
        ]

    def to_mp3_args(self, input_path: PathLike, output_path: PathLike) -> List[str]:
        """ffmpeg arguments for any container to mono MP3."""
        return [
            "-y",
            "-i", str(input_path),
            "-vn",
            "-ar", str(self.config.target_sample_rate),
            "-ac", str(self.config.channels),
            "-acodec", self.config.mp3_codec,
            "-q:a", str(self.config.mp3_quality),
            str(output_path),
        ]

    async def pcm_to_wav(self, pcm_path: PathLike, output_path: PathLike, sample_rate: int) -> Path:
        """Wrap decoded PCM into a WAV container.

        Args:
            pcm_path: Raw PCM file written from the decoder output
            output_path: Destination WAV path
            sample_rate: Rate reported by the decoder

        Returns:
            Path to the WAV file
        """
        return await self._run(self.pcm_to_wav_args(pcm_path, output_path, sample_rate), output_path, "pcm_to_wav")

    async def to_mp3(self, input_path: PathLike, output_path: PathLike) -> Path:
        """Re-encode an arbitrary audio file to MP3."""
        return await self._run(self.to_mp3_args(input_path, output_path), output_path, "to_mp3")

    async def _run(self, args: List[str], output_path: PathLike, mode: str) -> Path:
        ffmpeg = self.ensure_available()
        output_path = Path(output_path)

        logger.info("Converting audio format", extra={"mode": mode, "output": str(output_path)})

        try:
            result: ProcessResult = await run_command([ffmpeg, *args], timeout=self.config.timeout_seconds)
        except (ProcessTimeoutError, OSError) as e:
            raise ConversionFailedError(f"ffmpeg error: {e}") from e

        if not result.ok:
            logger.error(
                "Failed to convert audio",
                extra={"mode": mode, "exit_code": result.exit_code, "output": result.output[-500:]},
            )
            raise ConversionFailedError(
                f"ffmpeg exited with status {result.exit_code}",
                output=result.output,
                exit_code=result.exit_code,
            )

        if not output_path.exists():
            raise ConversionFailedError(
                f"ffmpeg did not produce {output_path}",
                output=result.output,
                exit_code=result.exit_code,
            )

        logger.info("Audio conversion completed", extra={"mode": mode, "output": str(output_path)})
        return output_path
