from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from ..db import MongoConnection, ReadyState

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# PUBLIC_INTERFACE
@router.get(
    "/health",
    summary="Health Check",
    responses={
        200: {"description": "Database connected"},
        503: {"description": "Database not connected"},
    },
)
def health_check(request: Request) -> JSONResponse:
    """
    Report liveness and database readiness.

    Returns:
        200 {"status": "OK", "dbStatus": "connected", "timestamp": ...} when the
        database connection is up, otherwise 503 with status "Unhealthy" and
        dbStatus "disconnected".
    """
    connection: MongoConnection = request.app.state.db
    connected = connection.check() is ReadyState.CONNECTED
    return JSONResponse(
        status_code=status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "OK" if connected else "Unhealthy",
            "dbStatus": "connected" if connected else "disconnected",
            "timestamp": _iso_now(),
        },
    )


# PUBLIC_INTERFACE
@router.get("/metrics", summary="Prometheus metrics", response_class=PlainTextResponse)
def metrics(request: Request) -> Response:
    """Prometheus text exposition of the application registry."""
    registry = request.app.state.metrics
    try:
        body = registry.render()
    except Exception as exc:
        logger.error("Metrics error: %s", exc)
        return PlainTextResponse(str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(content=body, media_type=registry.content_type)
