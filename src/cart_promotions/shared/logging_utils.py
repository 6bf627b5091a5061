"""Structured logging utilities for cart validation."""
import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any, Optional

# Shared by every StructuredLogger so a request-level ID reaches engine logs
_correlation_id: ContextVar[Optional[str]] = ContextVar(
    "cart_promotions_correlation_id", default=None
)


class StructuredLogger:
    """JSON logger that tags every entry with the current correlation ID."""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    @property
    def correlation_id(self) -> Optional[str]:
        return _correlation_id.get()

    def set_correlation_id(self, correlation_id: str):
        """Set correlation ID for current context."""
        _correlation_id.set(correlation_id)

    def clear_correlation_id(self):
        """Clear correlation ID."""
        _correlation_id.set(None)

    def generate_correlation_id(self) -> str:
        """Generate a new cart validation correlation ID."""
        return f"CART_{uuid.uuid4().hex[:12]}"

    def _format_message(self, level: str, message: str, **kwargs: Any) -> dict:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": level,
            "logger": self.logger.name,
            "message": message,
            "correlation_id": _correlation_id.get() or "none",
        }

        if kwargs:
            log_entry["context"] = kwargs

        return log_entry

    def _emit(self, level: int, message: str, **kwargs: Any):
        if not self.logger.isEnabledFor(level):
            return
        entry = self._format_message(logging.getLevelName(level), message, **kwargs)
        self.logger.log(level, json.dumps(entry, default=str))

    def info(self, message: str, **kwargs: Any):
        self._emit(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any):
        self._emit(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any):
        self._emit(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any):
        self._emit(logging.DEBUG, message, **kwargs)


def get_structured_logger(name: str) -> StructuredLogger:
    """Get a structured logger bound to the named stdlib logger."""
    return StructuredLogger(name)
