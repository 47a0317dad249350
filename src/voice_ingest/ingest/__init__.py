"""Attachment ingestion for messaging channels."""

from .attachments import (
    AttachmentTranscript,
    AudioReference,
    download_attachment,
    is_audio_file,
    transcribe_attachments,
)

__all__ = [
    "AttachmentTranscript",
    "AudioReference",
    "download_attachment",
    "is_audio_file",
    "transcribe_attachments",
]
