from __future__ import annotations

from typing import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)


# PUBLIC_INTERFACE
class Metrics:
    """
    Per-application Prometheus registry: default process/platform/GC
    collectors plus the request counter.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self) -> None:
        self.registry = CollectorRegistry()
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)
        self.http_requests = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            labelnames=("method", "route", "statusCode"),
            registry=self.registry,
        )

    def observe_request(self, method: str, route: str, status_code: int) -> None:
        self.http_requests.labels(method=method, route=route, statusCode=str(status_code)).inc()

    def render(self) -> bytes:
        """Serialize the registry in the Prometheus text format."""
        return generate_latest(self.registry)


def _route_label(request: Request) -> str:
    # FastAPI stores the matched APIRoute in the scope; unmatched paths
    # (404s, static files) fall back to the raw path.
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or request.url.path or "unknown"


# PUBLIC_INTERFACE
def request_counter_middleware(
    metrics: Metrics,
) -> Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]:
    """
    Build an HTTP middleware that counts every completed response, including
    responses to /metrics and /health and unhandled 500s.
    """

    async def count_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            response = await call_next(request)
        except Exception:
            metrics.observe_request(request.method, _route_label(request), 500)
            raise
        metrics.observe_request(request.method, _route_label(request), response.status_code)
        return response

    return count_requests
