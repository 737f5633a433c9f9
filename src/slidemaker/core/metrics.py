# src/slidemaker/core/metrics.py
import time

from prometheus_client import Counter, Histogram, make_asgi_app
from starlette.middleware.base import BaseHTTPMiddleware

HTTP_LABELS = ["route", "method", "status"]

REQUEST_LATENCY = Histogram(
    "slidemaker_http_request_seconds",
    "HTTP request latency by route template",
    HTTP_LABELS,
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30, 60, 120],
)
REQUEST_COUNT = Counter(
    "slidemaker_http_requests_total",
    "HTTP requests by route template",
    HTTP_LABELS,
)

EXTRACTIONS = Counter(
    "slidemaker_extractions_total",
    "Document extractions by format and outcome",
    ["format", "outcome"],
)
DECKS_GENERATED = Counter(
    "slidemaker_decks_generated_total",
    "Deck generations by outcome (ok or error code)",
    ["outcome"],
)
SLIDES_REPAIRED = Counter(
    "slidemaker_slides_repaired_total",
    "Slides that needed at least one field defaulted",
)


def route_label(request) -> str:
    """Route template such as /api/history/{entry_id}; "unmatched" when no route applied."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        resp = await call_next(request)
        labels = (route_label(request), request.method, str(resp.status_code))
        REQUEST_LATENCY.labels(*labels).observe(time.perf_counter() - start)
        REQUEST_COUNT.labels(*labels).inc()
        return resp


metrics_app = make_asgi_app()
