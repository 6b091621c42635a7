"""
Structured JSON logging.

Records are rendered by python-json-logger with the service name, the
environment and, inside a span, the OpenTelemetry trace and span ids.
``LOG_FORMAT=plain`` switches the console to a human-readable line for
local work. Domain events go to the ``core.audit`` logger, which always
logs at INFO.
"""

import sys

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

APP_LOGGERS = ("core", "api", "accounts", "licenses", "products")


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping service identity and trace context."""

    def __init__(self, *args, service: str = "license-store-service", environment: str = "development", **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service
        self.environment = environment

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["level"] = log_record.pop("levelname", record.levelname)
        log_record["service"] = self.service
        log_record["environment"] = self.environment

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = format(span_context.trace_id, "032x")
            log_record["span_id"] = format(span_context.span_id, "016x")


def get_logging_config(environment: str = "development", log_format: str = "json") -> dict:
    """
    Build the ``LOGGING`` dict for an environment.

    Args:
        environment: development, production or test
        log_format: ``json`` or ``plain``
    """
    app_level = "DEBUG" if environment == "development" else "INFO"

    def _logger(level: str) -> dict:
        return {"handlers": ["console"], "level": level, "propagate": False}

    loggers = {name: _logger(app_level) for name in APP_LOGGERS}
    loggers.update(
        {
            "core.audit": _logger("INFO"),
            "django": _logger("INFO"),
            "django.request": _logger("WARNING"),
            "django.db.backends": _logger("WARNING"),
        }
    )

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": ServiceJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
                "environment": environment,
            },
            "plain": {
                "format": "{asctime} {levelname:<7} {name}: {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "plain" if log_format == "plain" else "json",
                "stream": sys.stdout,
            },
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
        "loggers": loggers,
    }
