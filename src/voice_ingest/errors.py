"""Exception taxonomy for the audio ingestion pipeline.

Every error carries the pipeline ``stage`` that produced it so callers can
report where a voice message was lost without parsing messages.
"""

from typing import Optional


class Stage:
    """Names of the pipeline stages used for error attribution."""

    GUARD = "guard"
    DETECTION = "detection"
    DECODE = "decode"
    CONVERSION = "conversion"
    TRANSCRIPTION = "transcription"


class VoiceIngestError(Exception):
    """Base class for all pipeline errors."""

    stage: str = ""
    code: str = "voice_ingest_error"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if stage is not None:
            self.stage = stage

    def to_dict(self) -> dict:
        return {"error": self.code, "stage": self.stage, "detail": self.message}


class DetectionIOError(VoiceIngestError):
    """File could not be read for format detection (non-fatal)."""

    stage = Stage.DETECTION
    code = "detection_io_error"


class CodecDecodeError(VoiceIngestError):
    """SILK payload could not be decoded."""

    stage = Stage.DECODE
    code = "codec_decode_error"


class ConversionUnavailableError(VoiceIngestError):
    """The ffmpeg binary is not installed or not on PATH."""

    stage = Stage.CONVERSION
    code = "conversion_unavailable"


class ConversionFailedError(VoiceIngestError):
    """ffmpeg exited non-zero or did not produce its output file."""

    stage = Stage.CONVERSION
    code = "conversion_failed"

    def __init__(self, message: str, output: str = "", exit_code: Optional[int] = None):
        super().__init__(message)
        self.output = output
        self.exit_code = exit_code

    def __str__(self) -> str:
        if self.output:
            return f"{self.message}, output: {self.output}"
        return self.message


class TranscriberUnavailableError(VoiceIngestError):
    """No transcriber configured, or it has no credentials."""

    stage = Stage.GUARD
    code = "transcriber_unavailable"


class BackendError(VoiceIngestError):
    """Speech backend returned a non-2xx status or could not be reached."""

    stage = Stage.TRANSCRIPTION
    code = "backend_error"

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        if self.status is not None:
            return f"API error (status {self.status}): {self.body}"
        return self.message


class EmptyResultError(VoiceIngestError):
    """Backend answered successfully but produced no usable text."""

    stage = Stage.TRANSCRIPTION
    code = "empty_result"

    def __init__(self, message: str = "empty transcription result", body: str = ""):
        super().__init__(message)
        self.body = body
