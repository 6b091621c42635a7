"""
OpenTelemetry tracing for the license store.

Spans are exported over OTLP only when ``OTEL_ENABLED`` is set. Until
``setup_opentelemetry`` runs, the API's no-op provider hands out spans,
so views can open them unconditionally.
"""

import logging

from django.conf import settings
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Status, StatusCode

__all__ = ["get_tracer", "mark_failed", "mark_ok", "setup_opentelemetry", "Status", "StatusCode"]

logger = logging.getLogger(__name__)

_configured = False


def setup_opentelemetry() -> None:
    """Install the SDK tracer provider and auto-instrument Django and psycopg2."""
    global _configured  # pylint: disable=global-statement
    if _configured:
        return

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.OTEL_SERVICE_NAME,
                "service.version": settings.SERVICE_VERSION,
                "deployment.environment": settings.ENVIRONMENT,
            }
        )
    )
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(
                endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT,
                insecure=settings.OTEL_EXPORTER_OTLP_INSECURE,
            )
        )
    )
    trace.set_tracer_provider(provider)

    DjangoInstrumentor().instrument()
    if settings.DATABASES["default"]["ENGINE"].endswith("postgresql"):
        Psycopg2Instrumentor().instrument()

    _configured = True
    logger.info(
        "OpenTelemetry tracing enabled",
        extra={"endpoint": settings.OTEL_EXPORTER_OTLP_ENDPOINT, "service": settings.OTEL_SERVICE_NAME},
    )


def get_tracer(name: str):
    """Return a tracer for manual spans, usually keyed by module name."""
    return trace.get_tracer(name)


def mark_failed(span: Span, reason: str) -> None:
    """Flag a span whose request was rejected before reaching a handler."""
    span.set_attribute("error", reason)
    span.set_status(Status(StatusCode.ERROR, reason))


def mark_ok(span: Span) -> None:
    span.set_status(Status(StatusCode.OK))
