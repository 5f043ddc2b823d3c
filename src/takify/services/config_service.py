"""Configuration service for managing Takify configuration.

This module provides the ConfigService class, the single source of truth for
configuration in Takify. It handles:

- Loading and saving config.json
- Dot-path access to individual settings
- Credential storage for the signed-in user
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel

from takify.models.config_models import AppConfig

_APP_NAME = "takify"
_CREDENTIALS_FILE = "session.json"


class ConfigService:
    """Service for loading, saving and editing application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.credentials_dir = self.config_dir / "credentials"

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, creating defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Persist the current configuration."""
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(self.config.model_dump_json(indent=2))

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        value: Any = self.config
        for k in key.split("."):
            if not isinstance(value, BaseModel) or k not in type(value).model_fields:
                raise KeyError(key)
            value = getattr(value, k)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        The whole config is re-validated, so an invalid value raises a
        pydantic ``ValidationError`` and leaves the stored config untouched.
        """
        self.get(key)
        keys = key.split(".")
        config_dict = self.config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        self._config = AppConfig.model_validate(config_dict)
        self.save_config()

    def reset(self, key: str | None = None) -> None:
        """Reset the whole configuration or a single key to its default."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return

        default_value: Any = AppConfig()
        for k in key.split("."):
            default_value = getattr(default_value, k)
        if isinstance(default_value, BaseModel):
            default_value = default_value.model_dump()
        self.set(key, default_value)

    @property
    def credentials_path(self) -> Path:
        return self.credentials_dir / _CREDENTIALS_FILE

    def load_credentials(self) -> dict | None:
        """Load the stored session credentials, if any."""
        if not self.credentials_path.exists():
            return None
        try:
            with open(self.credentials_path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError):
            return None

    def save_credentials(self, token: str, user_id: str, email: str | None = None) -> None:
        """Save session credentials with owner-only permissions."""
        cred_data = {"token": token, "user_id": user_id}
        if email:
            cred_data["email"] = email

        self.credentials_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.credentials_path, "w", encoding="utf-8") as f:
            json.dump(cred_data, f, indent=2)

        self.credentials_path.chmod(0o600)

    def clear_credentials(self) -> None:
        """Remove stored session credentials."""
        if self.credentials_path.exists():
            self.credentials_path.unlink()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get the shared ConfigService instance."""
    return ConfigService()
