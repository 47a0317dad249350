"""Voice attachment ingestion and transcription."""

__version__ = "0.1.0"
