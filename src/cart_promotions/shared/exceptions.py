"""
Custom exceptions for the promotion engine.

Cart evaluation itself never raises on bad data. These exceptions cover the
places that are allowed to fail loudly: configuration loading and the strict
rule parser.
"""

from pathlib import Path
from typing import Any


class PromotionEngineException(Exception):
    """Base exception for all promotion engine errors."""

    pass


class ConfigurationError(PromotionEngineException):
    """Exception raised when engine settings cannot be loaded or are invalid."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        original_error: Exception | None = None,
    ):
        self.file_path = file_path
        self.original_error = original_error

        if file_path:
            message = f"Error loading settings file '{file_path}': {message}"

        if original_error:
            message = f"{message} (Original error: {original_error})"

        super().__init__(message)


class RuleParseError(PromotionEngineException):
    """Exception raised when a stored promotion rule payload is unusable."""

    def __init__(
        self,
        message: str,
        payload: Any | None = None,
        validation_errors: list[str] | None = None,
    ):
        self.payload = payload
        self.validation_errors = validation_errors or []

        error_parts = [message]

        if payload is not None:
            error_parts.append(f"Payload: {payload!r}")

        if validation_errors:
            error_parts.extend(
                [f"Validation error: {error}" for error in validation_errors]
            )

        super().__init__(" | ".join(error_parts))
