"""Launcher settings persisted as JSON in the data directory."""

import os
import json
import logging
from dataclasses import dataclass, asdict, field
from typing import Dict, Any, Optional

from ..errors import ConfigError
from .paths import SETTINGS_PATH

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = "ws://127.0.0.1:34115/bridge"


@dataclass
class UpdateStatusCodes:
    """Meaning of the integer codes returned by CheckForUpdates.

    The backend does not publish this mapping, so it is kept overridable
    from settings.json instead of being baked into the coordinator.
    """
    no_update: int = 0
    launcher_update: int = 2

    def __post_init__(self):
        if self.no_update == self.launcher_update:
            raise ConfigError(
                f"status code {self.no_update} cannot mean both 'no update' and 'launcher update'"
            )

    def has_update(self, code: int) -> bool:
        return code != self.no_update

    def is_launcher_update(self, code: int) -> bool:
        return code == self.launcher_update


@dataclass
class LauncherSettings:
    """Persistent launcher settings."""
    backend_url: str = DEFAULT_BACKEND_URL
    call_timeout: float = 30.0           # seconds per backend call
    log_level: str = "INFO"
    notification_duration: float = 5.0  # seconds, 0 = sticky
    status_codes: UpdateStatusCodes = field(default_factory=UpdateStatusCodes)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LauncherSettings':
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        codes = known.pop('status_codes', None)
        try:
            for key in ('call_timeout', 'notification_duration'):
                if key in known:
                    known[key] = float(known[key])
            settings = cls(**known)
            if isinstance(codes, dict):
                settings.status_codes = UpdateStatusCodes(**{
                    k: int(v) for k, v in codes.items()
                    if k in UpdateStatusCodes.__dataclass_fields__
                })
        except (TypeError, ValueError, OverflowError) as e:
            raise ConfigError(f"Invalid settings: {e}") from e
        for key in ('backend_url', 'log_level'):
            if not isinstance(getattr(settings, key), str):
                raise ConfigError(f"{key} must be a string")
        if not settings.call_timeout > 0:
            raise ConfigError(f"call_timeout must be positive, got {settings.call_timeout}")
        return settings

    @staticmethod
    def load(path: Optional[str] = None) -> 'LauncherSettings':
        """Load settings from JSON. Returns defaults if the file is missing or broken."""
        path = path or SETTINGS_PATH

        if not os.path.isfile(path):
            logger.info(f"[Settings] No settings file at {path}, using defaults")
            return LauncherSettings()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ConfigError("settings root must be an object")
            settings = LauncherSettings.from_dict(data)
            logger.info(f"[Settings] Loaded settings from {path}")
            return settings
        except (json.JSONDecodeError, OSError, ConfigError) as e:
            logger.warning(f"[Settings] Failed to load settings, using defaults: {e}")
            return LauncherSettings()

    def save(self, path: Optional[str] = None) -> bool:
        """Save settings to JSON."""
        path = path or SETTINGS_PATH
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2)
            logger.info(f"[Settings] Saved settings to {path}")
            return True
        except OSError as e:
            logger.error(f"[Settings] Failed to save settings: {e}")
            return False
