"""
Prometheus request metrics.

Requests are labelled by their URL route pattern (``api/v1/licenses/<uuid:license_id>/hwid``)
rather than the raw path, so license ids never become label values.
"""

import time
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import http_request_duration_seconds, http_requests_total

UNMATCHED = "unmatched"


def route_label(request: HttpRequest) -> str:
    """Route pattern of the resolved view, or a fixed label for 404s."""
    match = getattr(request, "resolver_match", None)
    if match is None or not match.route:
        return UNMATCHED
    return "/" + match.route


class MetricsMiddleware:
    """Counts requests and observes their latency per method and route."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        started = time.perf_counter()
        status_code = 500
        try:
            response = self.get_response(request)
            status_code = response.status_code
            return response
        finally:
            endpoint = route_label(request)
            http_requests_total.labels(method=request.method, endpoint=endpoint, status_code=status_code).inc()
            http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(
                time.perf_counter() - started
            )
