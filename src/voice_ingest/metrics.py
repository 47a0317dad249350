"""Prometheus metrics for the ingestion pipeline."""

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry to avoid conflicts with the default process collectors
registry = CollectorRegistry()

pipeline_runs = Counter(
    "voice_ingest_pipeline_runs_total",
    "Completed pipeline runs",
    ["provider", "outcome"],
    registry=registry,
)

conversions = Counter(
    "voice_ingest_conversions_total",
    "Audio conversions performed before transcription",
    ["mode"],
    registry=registry,
)

pipeline_errors = Counter(
    "voice_ingest_errors_total",
    "Pipeline errors by stage",
    ["stage", "error_type"],
    registry=registry,
)

processing_duration = Histogram(
    "voice_ingest_processing_duration_seconds",
    "End-to-end processing time for one audio file",
    ["provider"],
    registry=registry,
)
