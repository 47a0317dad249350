"""
API module for the voice ingestion service.

This module contains the REST API endpoints: health probes, Prometheus
metrics and audio upload transcription.
"""

from . import health, metrics, stt

__all__ = ["health", "metrics", "stt"]
