"""Configuration loader with TOML support and environment variable overrides."""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Type

import tomllib
from pydantic_settings import BaseSettings

from .settings import Settings


class ConfigLoader:
    """Load configuration from TOML files with environment variable overrides."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to TOML configuration file
        """
        self.config_path = config_path or self._get_default_config_path()

    def _get_default_config_path(self) -> Path:
        """Get default configuration file path."""
        config_env = os.getenv("VOICE_INGEST_CONFIG_FILE")
        if config_env:
            return Path(config_env)

        config_locations = [
            Path("config.toml"),
            Path("/etc/voice-ingest/config.toml"),
            Path.home() / ".config" / "voice-ingest" / "config.toml",
        ]

        for path in config_locations:
            if path.exists():
                return path

        return Path("config.toml")

    def load_toml(self) -> Dict[str, Any]:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return {}

        with open(self.config_path, "rb") as f:
            return tomllib.load(f)

    def merge_env_vars(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Let environment variables win over TOML values.

        pydantic-settings gives init kwargs priority over the environment, so
        a top-level key present in both places is removed from the TOML dict.
        A TOML section is turned into its settings object built from the
        remaining file values, which reads its own prefixed variables
        (e.g. ``VOICE_INGEST_ALIBABA_API_KEY``) for everything else.
        """
        env_names = {name.upper() for name in os.environ}
        merged = dict(config)
        for key, value in config.items():
            if isinstance(value, dict):
                section_cls = self._section_class(key)
                if section_cls is None:
                    continue
                prefix = section_cls.model_config.get("env_prefix", "").upper()
                file_values = {k: v for k, v in value.items() if f"{prefix}{k.upper()}" not in env_names}
                merged[key] = section_cls(**file_values)
            elif f"VOICE_INGEST_{key.upper()}" in env_names:
                merged.pop(key)
        return merged

    @staticmethod
    def _section_class(key: str) -> Optional[Type[BaseSettings]]:
        field = Settings.model_fields.get(key)
        if field is None:
            return None
        annotation = field.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseSettings):
            return annotation
        return None

    def load(self) -> Settings:
        """Load complete configuration with all overrides applied."""
        toml_config = self.load_toml()
        config = self.merge_env_vars(toml_config)
        return Settings(**config)


def load_config(config_path: Optional[Path] = None) -> Settings:
    """Load configuration from TOML file and environment variables.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Loaded configuration settings
    """
    loader = ConfigLoader(config_path)
    return loader.load()
