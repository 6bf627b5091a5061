"""
Settings model for the promotion engine.

Only presentation and gating knobs live here. Rule thresholds have fixed
defaults (see ``cart_promotions.models.RULE_DEFAULTS``) and are not
configurable.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..shared.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class EngineSettings(BaseModel):
    """Settings shared by the rule evaluator, tip generator and HTTP layer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    currency_symbol: str = Field(
        "R", min_length=1, description="Symbol prefixed to money amounts in messages"
    )
    tip_prefix: str = Field(
        "💡 ", description="Marker prepended to every promotion tip"
    )
    log_level: str = Field("INFO", description="Log level for the package loggers")
    enforce_schedule: bool = Field(
        False,
        description=(
            "Drop promotions outside their start/end window before validating "
            "(HTTP layer only)"
        ),
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    @classmethod
    def from_file(cls, config_path: str | Path) -> "EngineSettings":
        """
        Load settings from a JSON file.

        Args:
            config_path: Path to the JSON settings file

        Returns:
            EngineSettings: Validated settings

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: If the file is not valid JSON or fails validation
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Settings file not found: {config_path}")

        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError("Invalid JSON", config_path, e)

        try:
            settings = cls(**config_data)
        except (ValidationError, TypeError) as e:
            raise ConfigurationError("Invalid settings", config_path, e)

        logger.debug(f"Loaded engine settings from {config_path}")
        return settings

    def to_file(self, config_path: str | Path) -> None:
        """Write settings to a JSON file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2, ensure_ascii=False)


DEFAULT_SETTINGS = EngineSettings()
