"""
Logging configuration for structured JSON logging.

Every record is emitted as one JSON object so that ``extra`` fields
(license_id, attempt, correlation_id, ...) survive into the log store.
"""

import sys

from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id
from pythonjsonlogger import jsonlogger

APP_LOGGERS = ("core", "api", "licenses", "revocations")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps records with the active trace context."""

    def add_fields(self, log_record, record, message_dict):
        """Add trace and span ids when a span is active."""
        super().add_fields(log_record, record, message_dict)

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record.setdefault("trace_id", format_trace_id(span_context.trace_id))
            log_record.setdefault("span_id", format_span_id(span_context.span_id))


def get_logging_config(environment: str = "development") -> dict:
    """
    Get logging configuration for the application.

    Args:
        environment: Environment name (development, production, test)

    Returns:
        Django logging configuration dictionary
    """
    log_level = "DEBUG" if environment == "development" else "INFO"

    loggers = {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "django.request": {"handlers": ["console"], "level": "WARNING", "propagate": False},
        "django.db.backends": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    }
    for name in APP_LOGGERS:
        loggers[name] = {"handlers": ["console"], "level": log_level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
        },
        "root": {"handlers": ["console"], "level": log_level},
        "loggers": loggers,
    }
