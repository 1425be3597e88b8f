"""Prometheus metrics middleware."""
import time

from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

# Metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

http_errors_total = Counter(
    "http_errors_total",
    "Total HTTP errors",
    ["method", "endpoint", "error_type"],
)

record_store_requests_total = Counter(
    "record_store_requests_total",
    "Calls made to the Apper record store",
    ["table", "operation", "outcome"],
)


def _endpoint_label(request: Request) -> str:
    # Route templates keep label cardinality bounded.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def setup_metrics(app: FastAPI) -> None:
    """Setup Prometheus metrics endpoint and request instrumentation."""

    @app.middleware("http")
    async def record_request_metrics(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            http_errors_total.labels(request.method, _endpoint_label(request), type(exc).__name__).inc()
            raise
        endpoint = _endpoint_label(request)
        http_request_duration_seconds.labels(request.method, endpoint).observe(time.perf_counter() - started)
        http_requests_total.labels(request.method, endpoint, str(response.status_code)).inc()
        if response.status_code >= 500:
            http_errors_total.labels(request.method, endpoint, str(response.status_code)).inc()
        return response

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
