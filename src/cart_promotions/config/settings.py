"""
Settings loading for the promotion engine.

This module resolves EngineSettings from an explicit file, environment
variables, or the default search locations.
"""

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from ..shared.exceptions import ConfigurationError
from .models import EngineSettings

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_NAME = "promotions.json"

# Environment variable -> settings field
ENV_VARS = {
    "PROMO_CURRENCY_SYMBOL": "currency_symbol",
    "PROMO_TIP_PREFIX": "tip_prefix",
    "PROMO_LOG_LEVEL": "log_level",
    "PROMO_ENFORCE_SCHEDULE": "enforce_schedule",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_settings(
    config_path: str | Path | None = None, config_name: str = DEFAULT_SETTINGS_NAME
) -> EngineSettings:
    """
    Load settings from file with path resolution.

    Args:
        config_path: Explicit path to a settings file or a directory containing one
        config_name: Name of the settings file (default: "promotions.json")

    Returns:
        EngineSettings: Loaded and validated settings

    Raises:
        FileNotFoundError: If no settings file is found
        ConfigurationError: If the settings file is invalid
    """
    if config_path is None:
        search_paths = [
            Path.cwd() / config_name,
            Path.cwd() / "config" / config_name,
        ]

        for path in search_paths:
            if path.exists():
                config_path = path
                break
        else:
            raise FileNotFoundError(
                f"Settings file '{config_name}' not found in any of: "
                f"{[str(p) for p in search_paths]}"
            )

    config_path = Path(config_path)

    if config_path.is_dir():
        config_path = config_path / config_name

    return EngineSettings.from_file(config_path)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got '{raw}'")


def get_settings_from_env() -> EngineSettings | None:
    """
    Try to load settings from environment variables.

    ``PROMO_CONFIG_FILE`` points at a settings file and wins over the
    individual variables.

    Returns:
        EngineSettings if any variable is set, None otherwise

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    config_file_env = os.getenv("PROMO_CONFIG_FILE")
    if config_file_env:
        return load_settings(config_file_env)

    env_values = {key: os.getenv(key) for key in ENV_VARS}
    if not any(value is not None for value in env_values.values()):
        return None

    config_data = {}
    for env_name, field_name in ENV_VARS.items():
        raw = env_values[env_name]
        if raw is None:
            continue
        if field_name == "enforce_schedule":
            config_data[field_name] = _parse_bool(env_name, raw)
        else:
            config_data[field_name] = raw

    try:
        return EngineSettings(**config_data)
    except ValidationError as e:
        raise ConfigurationError("Invalid environment variable settings", original_error=e)


def load_settings_with_fallback(config_path: str | Path | None = None) -> EngineSettings:
    """
    Load settings with fallback to environment variables and defaults.

    Priority order:
    1. Explicit settings file path
    2. Environment variable PROMO_CONFIG_FILE
    3. Individual PROMO_* environment variables
    4. Default locations (promotions.json, config/promotions.json)
    5. Built-in defaults

    Args:
        config_path: Optional explicit path to a settings file

    Returns:
        EngineSettings: Loaded settings
    """
    if config_path:
        try:
            return load_settings(config_path)
        except FileNotFoundError:
            logger.warning(f"Settings file {config_path} not found, trying fallbacks")

    try:
        env_settings = get_settings_from_env()
        if env_settings:
            return env_settings
    except (ConfigurationError, FileNotFoundError) as e:
        logger.warning(f"Ignoring environment settings: {e}")

    try:
        return load_settings()
    except FileNotFoundError:
        pass

    logger.info("No promotion settings found, using built-in defaults")
    return EngineSettings()
