"""
App configuration for License Store Service.
"""

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class LicenseStoreServiceConfig(AppConfig):
    """App configuration for LicenseStoreService."""

    name = "LicenseStoreService"
    verbose_name = "License Store Service"

    def ready(self):
        """Called when Django starts."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()

        if settings.OTEL_ENABLED:
            from core.instrumentation import setup_opentelemetry

            setup_opentelemetry()
