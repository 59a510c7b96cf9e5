"""Configuration loader with validation and error handling."""

import os
import yaml
import logging
from pathlib import Path
from typing import Optional, Dict, Any
from pydantic import ValidationError

from .models import CardSettings

logger = logging.getLogger(__name__)

# Environment variable pointing at a settings YAML file
CONFIG_ENV_VAR = "AICHAR_CONFIG"

_active_settings: Optional[CardSettings] = None


class ConfigLoadError(Exception):
    """Base exception for configuration loading errors."""
    pass


class ConfigValidationError(ConfigLoadError):
    """Configuration validation failed."""

    def __init__(self, errors: list[dict], file_path: Path):
        self.errors = errors
        self.file_path = file_path
        super().__init__(self._format_errors())

    def _format_errors(self) -> str:
        """Format validation errors for user display."""
        lines = [f"Configuration validation failed for {self.file_path}:\n"]
        for error in self.errors:
            loc = " → ".join(str(l) for l in error['loc'])
            msg = error['msg']
            lines.append(f"  • {loc}: {msg}")
        return "\n".join(lines)


class ConfigLoader:
    """Loads and validates card settings files."""

    def load_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML file with error handling."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigLoadError(f"Configuration file not found: {file_path}")
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Invalid YAML in {file_path}: {e}")
        except OSError as e:
            raise ConfigLoadError(f"Failed to load {file_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(f"Configuration in {file_path} must be a mapping, got {type(data).__name__}")
        return data

    def load_settings(self, file_path: Optional[Path] = None) -> CardSettings:
        """
        Load card settings.

        Uses file_path if given, then $AICHAR_CONFIG, then defaults.
        """
        if file_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if not env_path:
                logger.debug("No settings file configured, using defaults")
                return CardSettings()
            file_path = Path(env_path)

        file_path = Path(file_path)
        data = self.load_yaml(file_path)
        try:
            settings = CardSettings(**data)
        except ValidationError as e:
            raise ConfigValidationError(e.errors(), file_path)

        logger.info(f"Loaded card settings from {file_path}")
        return settings


def get_settings() -> CardSettings:
    """Return the active settings, loading them on first use."""
    global _active_settings
    if _active_settings is None:
        _active_settings = ConfigLoader().load_settings()
    return _active_settings


def use_settings(settings: Optional[CardSettings]) -> None:
    """Replace the active settings. None reloads them on next access."""
    global _active_settings
    _active_settings = settings
