"""Prometheus metrics endpoint."""

import time

from fastapi import APIRouter, Request, Response
from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST

from ..metrics import registry
from ..utils.logging import get_logger

logger = get_logger(__name__)

request_count = Counter(
    'voice_ingest_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'voice_ingest_request_duration_seconds',
    'Request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

active_requests = Gauge(
    'voice_ingest_active_requests',
    'Number of active requests',
    registry=registry
)

error_count = Counter(
    'voice_ingest_request_errors_total',
    'Unhandled exceptions raised while serving requests',
    ['error_type'],
    registry=registry
)

router = APIRouter()


@router.get(
    "/metrics",
    response_class=Response,
    summary="Prometheus metrics",
    description="Expose metrics in Prometheus format"
)
async def metrics():
    """Return metrics in Prometheus format."""
    return Response(
        content=generate_latest(registry),
        media_type=CONTENT_TYPE_LATEST
    )


class MetricsMiddleware:
    """Middleware to collect request metrics."""

    async def __call__(self, request: Request, call_next):
        """Process request and collect metrics."""
        active_requests.inc()
        start_time = time.time()

        try:
            response = await call_next(request)

            duration = time.time() - start_time
            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)

            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code
            ).inc()

            return response

        except Exception as e:
            error_count.labels(error_type=type(e).__name__).inc()
            raise

        finally:
            active_requests.dec()
