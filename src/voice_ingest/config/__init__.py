"""Configuration models and loaders for the voice ingestion service."""

from .loader import load_config
from .settings import Settings

__all__ = ["Settings", "load_config"]
