"""Speech-to-text backends.

Each transcriber carries the ``provider_id`` used to look up its accepted
audio formats.
"""

from .base import AudioFileError, Transcriber, TranscriptionResult
from .chat_completion import ChatCompletionTranscriber
from .factory import build_transcriber
from .whisper import WhisperTranscriber, groq_transcriber, openai_transcriber

__all__ = [
    "AudioFileError",
    "ChatCompletionTranscriber",
    "Transcriber",
    "TranscriptionResult",
    "WhisperTranscriber",
    "build_transcriber",
    "groq_transcriber",
    "openai_transcriber",
]
