"""
Prometheus metrics middleware for HTTP request tracking.

Records request duration and status per method and endpoint. Identifier
segments are collapsed to ``:id`` to keep label cardinality bounded.
"""

import re
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..monitoring.prometheus_metrics import prometheus_metrics

ULID_SEGMENT = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")
UUID_SEGMENT = re.compile(r"^[0-9a-fA-F-]{36}$")


def normalize_path(raw_path: str) -> str:
    """/api/v1/bookings/01H.../cancel -> /api/v1/bookings/:id/cancel"""
    return "/".join(
        ":id" if segment.isdigit() or ULID_SEGMENT.match(segment) or UUID_SEGMENT.match(segment) else segment
        for segment in raw_path.split("/")
    )


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)
        start_time = time.time()
        response = await call_next(request)
        prometheus_metrics.record_http_request(
            method=method,
            endpoint=path,
            duration=time.time() - start_time,
            status_code=response.status_code,
        )
        return response
