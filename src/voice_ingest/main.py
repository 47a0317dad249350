"""Main application entry point for the voice ingestion service."""

import argparse
import signal
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI

from . import __version__
from .api import health, metrics, stt
from .config.loader import load_config
from .config.settings import Settings
from .dependencies import close_audio_processor, get_audio_processor, set_settings
from .utils.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Voice Ingest Service", extra={"version": __version__})

    processor = get_audio_processor()
    if not processor.is_available():
        logger.warning(
            "Transcriber not available, uploads will be rejected",
            extra={"provider": processor.provider_id},
        )

    yield

    logger.info("Shutting down Voice Ingest Service")
    await close_audio_processor()


def create_app(config_path: Optional[Path] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Create FastAPI application instance.

    Args:
        config_path: Optional path to configuration file
        settings: Pre-built settings; takes precedence over ``config_path``

    Returns:
        Configured FastAPI application
    """
    settings = settings or load_config(config_path)
    set_settings(settings)
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        lifespan=lifespan
    )

    app.middleware("http")(metrics.MetricsMiddleware())

    app.include_router(health.router, tags=["health"])
    app.include_router(metrics.router, tags=["monitoring"])
    app.include_router(stt.router, prefix="/stt/v1", tags=["stt"])

    return app


def main():
    """Main entry point for running the application."""
    parser = argparse.ArgumentParser(description="Voice attachment transcription service")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")
    args = parser.parse_args()

    settings = load_config(args.config)
    app = create_app(settings=settings)

    def signal_handler(sig, frame):
        logger.info(f"Received signal {sig}")
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_config=None  # We handle logging ourselves
    )


if __name__ == "__main__":
    main()
