"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

REQUEST_LATENCY = Histogram(
    "nasst_request_latency_seconds",
    "Latency of HTTP requests",
    labelnames=("endpoint", "method"),
    registry=REGISTRY,
)

RECONCILE_DURATION = Histogram(
    "nasst_reconcile_duration_seconds",
    "Index reconciliation duration",
    registry=REGISTRY,
)

EMBEDDED_CHUNKS = Counter(
    "nasst_embedded_chunks_total",
    "Chunks sent to the embedding service during reconciliation",
    registry=REGISTRY,
)

ANSWER_COUNT = Counter(
    "nasst_answers_total",
    "Answered questions by outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)

INDEX_SIZE = Gauge(
    "nasst_index_chunks",
    "Number of chunks in the current index snapshot",
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "REQUEST_LATENCY",
    "RECONCILE_DURATION",
    "EMBEDDED_CHUNKS",
    "ANSWER_COUNT",
    "INDEX_SIZE",
    "metrics_response",
]
