"""Configuration loading and validation."""

from .models import CardSettings, ToolInfo
from .loader import (
    ConfigLoader,
    ConfigLoadError,
    ConfigValidationError,
    CONFIG_ENV_VAR,
    get_settings,
    use_settings,
)

__all__ = [
    "CardSettings",
    "ToolInfo",
    "ConfigLoader",
    "ConfigLoadError",
    "ConfigValidationError",
    "CONFIG_ENV_VAR",
    "get_settings",
    "use_settings",
]
