"""
Configuration for the CCRM platform.

One ``AppConfig`` is built at startup (defaults, a dict, or a JSON file) and
passed to the components that need it.
"""

import json
import os
from dataclasses import dataclass, fields, asdict
from datetime import datetime
from typing import Any, Dict, Optional

from .core.exceptions import ConfigurationError


DEFAULT_MAX_CREDITS = 24


@dataclass
class AppConfig:
    """Thresholds and folder locations."""
    data_folder: str = "data"
    export_folder: str = "exports"
    backup_folder: str = "backups"
    max_credits_per_semester: int = DEFAULT_MAX_CREDITS
    backup_date_format: str = "%Y-%m-%d_%H-%M-%S"
    log_level: str = "INFO"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Reject unusable settings."""
        max_credits = self.max_credits_per_semester
        if isinstance(max_credits, bool) or not isinstance(max_credits, int) or max_credits <= 0:
            raise ConfigurationError(
                "max_credits_per_semester must be a positive integer",
                details={"max_credits_per_semester": max_credits}
            )
        for name in ("data_folder", "export_folder", "backup_folder"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigurationError(f"{name} must be a non-empty path")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AppConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in (data or {}).items() if key in known})

    @classmethod
    def from_file(cls, path: str) -> "AppConfig":
        """Load a JSON configuration file."""
        try:
            with open(path, 'r', encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {path}")
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load configuration from {path}: {str(e)}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration in {path} must be a JSON object")
        return cls.from_dict(data)

    def ensure_directories(self) -> None:
        """Create the data, export and backup folders if missing."""
        for folder in (self.data_folder, self.export_folder, self.backup_folder):
            os.makedirs(folder, exist_ok=True)

    def backup_folder_name(self, now: Optional[datetime] = None) -> str:
        """Timestamped backup directory path under the backup folder."""
        timestamp = (now or datetime.now()).strftime(self.backup_date_format)
        return os.path.join(self.backup_folder, f"backup_{timestamp}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
