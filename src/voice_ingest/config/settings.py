"""Configuration settings for the voice ingestion service."""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TranscriberConfig(BaseSettings):
    """Credentials and endpoint for one speech-to-text backend."""

    api_key: str = ""
    api_base: str = ""
    model: str = ""
    timeout: float = 60.0

    model_config = SettingsConfigDict(extra="ignore")


class GroqConfig(TranscriberConfig):
    """Groq Whisper API settings."""

    api_base: str = "https://api.groq.com/openai/v1"
    model: str = "whisper-large-v3"
    timeout: float = 60.0

    model_config = SettingsConfigDict(env_prefix="VOICE_INGEST_GROQ_", extra="ignore")


class OpenAIConfig(TranscriberConfig):
    """OpenAI Whisper API settings."""

    api_base: str = "https://api.openai.com/v1"
    model: str = "whisper-1"
    timeout: float = 60.0

    model_config = SettingsConfigDict(env_prefix="VOICE_INGEST_OPENAI_", extra="ignore")


class AlibabaConfig(TranscriberConfig):
    """DashScope (Alibaba Cloud) OpenAI-compatible API settings."""

    api_base: str = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    model: str = "qwen3-asr-flash"
    timeout: float = 120.0

    model_config = SettingsConfigDict(env_prefix="VOICE_INGEST_ALIBABA_", extra="ignore")


class ConversionConfig(BaseSettings):
    """ffmpeg and SILK decoding parameters."""

    ffmpeg_bin: str = "ffmpeg"
    timeout_seconds: float = 60.0
    silk_sample_rate: int = 24000
    target_sample_rate: int = 16000
    channels: int = 1
    mp3_codec: str = "libmp3lame"
    mp3_quality: int = 2

    @field_validator("silk_sample_rate", "target_sample_rate")
    @classmethod
    def validate_sample_rate(cls, v):
        if v <= 0:
            raise ValueError(f"Sample rate must be positive, got {v}")
        return v

    model_config = SettingsConfigDict(env_prefix="VOICE_INGEST_CONVERSION_", extra="ignore")


class APIConfig(BaseSettings):
    """API configuration settings."""

    host: str = "0.0.0.0"
    port: int = 8000
    request_timeout: float = 180.0

    model_config = SettingsConfigDict(env_prefix="VOICE_INGEST_API_", extra="ignore")


class Settings(BaseSettings):
    """Main application settings."""

    app_name: str = "Voice Ingest Service"
    environment: str = "production"
    log_level: str = "INFO"
    log_format: str = "json"

    provider: str = Field(default="groq", description="Active transcription backend")
    temp_dir: Optional[Path] = None

    groq: GroqConfig = Field(default_factory=GroqConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    alibaba: AlibabaConfig = Field(default_factory=AlibabaConfig)
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    @field_validator("provider")
    @classmethod
    def normalize_provider(cls, v):
        return v.strip().lower()

    @field_validator("temp_dir", mode="before")
    @classmethod
    def validate_temp_dir(cls, v):
        if isinstance(v, str):
            return Path(v) if v else None
        return v

    def transcriber_config(self, provider: Optional[str] = None) -> Optional[TranscriberConfig]:
        """Return the backend section for ``provider`` (defaults to the active one)."""
        sections = {
            "groq": self.groq,
            "openai": self.openai,
            "alibaba": self.alibaba,
        }
        return sections.get(provider or self.provider)

    model_config = SettingsConfigDict(
        env_prefix="VOICE_INGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings instance."""
    return Settings()
