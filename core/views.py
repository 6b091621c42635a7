"""
Operational endpoints: liveness, database health, readiness and the Prometheus scrape.
"""

import logging
from typing import Dict

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import HttpResponse, JsonResponse
from django.views import View
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

logger = logging.getLogger(__name__)


def _database_reachable() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return True
    except DatabaseError as e:
        logger.warning("Database check failed: %s", e)
        return False


def readiness_checks() -> Dict[str, bool]:
    """Everything a replica needs before it can take traffic."""
    return {
        "database": _database_reachable(),
        "session_signing": bool(settings.SESSION_TOKEN_SECRET),
    }


class HealthView(View):
    """Liveness: the process answers."""

    def get(self, _request):
        return JsonResponse(
            {"status": "healthy", "service": settings.OTEL_SERVICE_NAME, "version": settings.SERVICE_VERSION}
        )


class HealthDBView(View):
    def get(self, _request):
        if _database_reachable():
            return JsonResponse({"status": "healthy", "database": "connected"})
        return JsonResponse({"status": "unhealthy", "database": "disconnected"}, status=503)


class ReadyView(View):
    """Readiness: 503 until every check in ``readiness_checks`` passes."""

    def get(self, _request):
        checks = readiness_checks()
        ready = all(checks.values())
        return JsonResponse({"status": "ready" if ready else "not_ready", "checks": checks}, status=200 if ready else 503)


class MetricsView(View):
    """Prometheus scrape in text exposition format."""

    def get(self, _request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
