"""Prometheus metrics for request signing and verification."""

import os

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.requests import Request
from starlette.responses import Response

# === Counters ===

AUTH_REQUESTS_TOTAL = Counter(
    "aksk_auth_requests_total",
    "Total signature verifications",
    ["outcome", "reason"],  # outcome: allowed, denied; reason: error code or "ok"
)

SIGNED_REQUESTS_TOTAL = Counter(
    "aksk_signed_requests_total",
    "Total outgoing requests signed",
    ["method"],
)

# === Histograms ===

AUTH_LATENCY = Histogram(
    "aksk_auth_latency_seconds",
    "Signature verification latency in seconds",
    ["outcome"],
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25],
)


# === Helper Functions ===


def record_auth_result(outcome: str, reason: str, latency: float) -> None:
    """Record a verification outcome."""
    AUTH_REQUESTS_TOTAL.labels(outcome=outcome, reason=reason).inc()
    AUTH_LATENCY.labels(outcome=outcome).observe(latency)


def record_signed_request(method: str) -> None:
    """Record an outgoing signed request."""
    SIGNED_REQUESTS_TOTAL.labels(method=method.upper()).inc()


# === HTTP Endpoint ===


async def metrics_endpoint(_request: Request) -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    multiproc_dir = os.environ.get("PROMETHEUS_MULTIPROC_DIR")
    if multiproc_dir:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)  # type: ignore[no-untyped-call]
        return Response(
            generate_latest(registry),
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    return Response(
        generate_latest(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
