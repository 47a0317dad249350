"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Dict, Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..audio.processor import AudioProcessor
from ..dependencies import get_audio_processor
from ..utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class HealthStatus(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    version: str
    checks: Dict[str, Any]


def collect_checks(processor: AudioProcessor) -> Dict[str, str]:
    """Availability of each pipeline dependency. No network calls."""
    return {
        "api": "healthy",
        "transcriber": "healthy" if processor.is_available() else "unavailable",
        "ffmpeg": "healthy" if processor.converter.is_available() else "unavailable",
    }


@router.get(
    "/health",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    description="Check if the service is healthy and ready to accept requests"
)
async def health_check(processor: AudioProcessor = Depends(get_audio_processor)) -> HealthStatus:
    """Perform health check and return service status."""
    checks = collect_checks(processor)

    # Without a transcriber nothing works; without ffmpeg only conversions fail
    if checks["transcriber"] != "healthy":
        overall_status = "unhealthy"
    elif checks["ffmpeg"] != "healthy":
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthStatus(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        checks=checks
    )


@router.get(
    "/health/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    description="Simple liveness check for Kubernetes"
)
async def liveness():
    """Simple liveness probe."""
    return {"status": "alive"}


@router.get(
    "/health/ready",
    summary="Readiness probe",
    description="Check if service is ready to accept traffic"
)
async def readiness(processor: AudioProcessor = Depends(get_audio_processor)):
    """Readiness probe: ready once a transcriber has credentials."""
    if processor.is_available():
        return {"status": "ready"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready"},
    )
