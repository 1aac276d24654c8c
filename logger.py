"""
Logging utilities for the magazine backend.
Provides structured logging with per-request correlation IDs.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from config import get_settings

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "correlation_id", "service_name"}


class ServiceContextFilter(logging.Filter):
    """Stamp the service name and, optionally, the correlation ID on each record."""

    def __init__(self, service_name: str, include_correlation_id: bool = True):
        super().__init__()
        self.service_name = service_name
        self.include_correlation_id = include_correlation_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        if self.include_correlation_id:
            record.correlation_id = correlation_id_var.get() or "no-correlation-id"
        else:
            record.correlation_id = "-"
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "no-correlation-id"),
            "service": getattr(record, "service_name", "unknown"),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class StructuredFormatter(logging.Formatter):
    """Human-readable formatter: [timestamp] [level] [service] [correlation_id] logger: message"""

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", "no-correlation-id")
        service = getattr(record, "service_name", "unknown")
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]

        base_msg = (
            f"[{timestamp}] [{record.levelname}] [{service}] [{correlation_id}] "
            f"{record.name}: {record.getMessage()}"
        )
        if record.exc_info:
            base_msg += f"\n{self.formatException(record.exc_info)}"
        return base_msg


def setup_logging(
    service_name: str,
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
    include_correlation_id: Optional[bool] = None,
) -> logging.Logger:
    """
    Set up logging for the service.

    Loggers obtained with ``get_logger("<area>")`` are children of the
    SERVICE_NAME logger and propagate into the logger configured here.

    Args:
        service_name: Root logger name for the service (e.g. 'magazine')
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to use JSON formatting
        include_correlation_id: Whether to include correlation IDs

    Returns:
        Configured logger instance
    """
    settings = get_settings()

    level = (log_level or settings.logging.level).upper()
    use_json = json_logs if json_logs is not None else settings.logging.json_logs
    include_corr_id = (
        include_correlation_id
        if include_correlation_id is not None
        else settings.logging.include_correlation_id
    )

    logger = logging.getLogger(service_name)
    logger.setLevel(getattr(logging, level))

    # Remove existing handlers to avoid duplicates on re-setup
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level))
    handler.setFormatter(JSONFormatter() if use_json else StructuredFormatter())
    handler.addFilter(ServiceContextFilter(service_name, include_corr_id))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(area: str) -> logging.Logger:
    """Get the logger for one area of the service, e.g. ``<SERVICE_NAME>.articles``."""
    return logging.getLogger(f"{get_settings().service_name}.{area}")


def set_correlation_id(correlation_id: Optional[str]) -> None:
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


class CorrelationContext:
    """Context manager for setting correlation IDs."""

    def __init__(self, correlation_id: Optional[str] = None):
        self.correlation_id = correlation_id or generate_correlation_id()
        self._token = None

    def __enter__(self) -> str:
        self._token = correlation_id_var.set(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        correlation_id_var.reset(self._token)
