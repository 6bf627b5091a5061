"""Logging configuration for structured promotion logs."""
import logging
import sys

PACKAGE_LOGGER = "cart_promotions"


def configure_structured_logging(level: str = "INFO") -> None:
    """
    Route package logs to stdout as bare messages.

    Structured entries are already JSON encoded by StructuredLogger, so the
    handler format only passes the message through.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        stream=sys.stdout,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(numeric_level)

    # Request logs are noisy on every cart change
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
