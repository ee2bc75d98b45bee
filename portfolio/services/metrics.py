"""
Prometheus metrics for the portfolio API
"""

import time
from fastapi import Request
from fastapi.responses import Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from portfolio.config import settings

REQUESTS_TOTAL = Counter(
    "portfolio_http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"]
)

REQUEST_DURATION = Histogram(
    "portfolio_http_request_seconds",
    "Request duration in seconds",
    ["method", "route"]
)

UPLOADS_TOTAL = Counter(
    "portfolio_uploads_total",
    "Photo uploads by outcome",
    ["status"]
)

DELETES_TOTAL = Counter(
    "portfolio_deletes_total",
    "Photos deleted"
)

ENABLED = settings.METRICS_ENABLED


async def metrics_endpoint():
    """Prometheus metrics endpoint"""
    if not ENABLED:
        return Response(b"metrics disabled", media_type="text/plain")
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def metrics_middleware(app):
    """Add request metrics middleware to the app when enabled"""
    if not ENABLED:
        return

    @app.middleware("http")
    async def _metrics(request: Request, call_next):
        start = time.time()
        response = await call_next(request)

        # label by route template, not raw path, to keep cardinality bounded
        route = request.scope.get("route")
        path = getattr(route, "path", "unmatched")
        REQUESTS_TOTAL.labels(
            method=request.method,
            route=path,
            status=str(response.status_code)
        ).inc()

        REQUEST_DURATION.labels(
            method=request.method,
            route=path
        ).observe(time.time() - start)

        return response


def record_upload(status: str):
    UPLOADS_TOTAL.labels(status=status).inc()


def record_delete():
    DELETES_TOTAL.inc()
