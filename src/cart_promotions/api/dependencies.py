"""FastAPI dependencies for the promotion API."""

import logging
from functools import lru_cache

from ..config.models import EngineSettings
from ..config.settings import load_settings_with_fallback

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Resolve engine settings once per process."""
    settings = load_settings_with_fallback()
    logger.info(
        f"Promotion settings: currency={settings.currency_symbol!r}, "
        f"enforce_schedule={settings.enforce_schedule}"
    )
    return settings
