"""Engine settings models and loaders."""

from .models import EngineSettings
from .settings import (
    get_settings_from_env,
    load_settings,
    load_settings_with_fallback,
)

__all__ = [
    "EngineSettings",
    "get_settings_from_env",
    "load_settings",
    "load_settings_with_fallback",
]
