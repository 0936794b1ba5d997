"""
Platform configuration for the MoxiWorks Platform client.

Holds the base URL, partner credentials and debug toggle. Settings are read
from a JSON file in the user's home directory, overridden by MOXI_PLATFORM_*
environment variables, and kept as a process-wide default that clients read
at call time.
"""

import json
from pathlib import Path
from typing import Optional, TypedDict

from pydantic import AliasChoices, Field, ValidationError as SettingsValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from moxiworks_platform.logging_helper import Log


class SettingsSchema(TypedDict, total=False):
    url: str
    platform_identifier: Optional[str]
    platform_secret: Optional[str]
    debug: bool
    timeout: float


SETTINGS_DIR = Path.home() / ".moxiworks_platform"
SETTINGS_FILE = SETTINGS_DIR / "settings.json"

DEFAULT_URL = "https://api.moxiworks.com"

KNOWN_KEYS = tuple(SettingsSchema.__annotations__)


class PlatformConfig(BaseSettings):
    """Connection settings shared by every platform request."""

    url: str = DEFAULT_URL
    platform_identifier: Optional[str] = Field(
        None, validation_alias=AliasChoices("platform_identifier", "moxi_platform_identifier")
    )
    platform_secret: Optional[str] = Field(
        None, validation_alias=AliasChoices("platform_secret", "moxi_platform_secret")
    )
    debug: bool = False
    timeout: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="MOXI_PLATFORM_",
        extra="ignore",
        case_sensitive=False,
    )

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings):
        # Environment wins over values passed in (the settings file)
        return env_settings, init_settings

    @field_validator('url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    def has_credentials(self) -> bool:
        return bool(self.platform_identifier) and bool(self.platform_secret)


def _read_settings_file(path: Path) -> SettingsSchema:
    if not path.exists():
        Log.info(f"Settings file not found, using defaults: {path}")
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Settings data is not a JSON object")
    except (OSError, ValueError) as err:
        Log.warn(f"Failed to read settings file ({path}): {err}")
        return {}

    # Merge only known keys
    return {key: data[key] for key in KNOWN_KEYS if key in data}  # type: ignore[misc]


def load_settings(path: Optional[Path] = None) -> PlatformConfig:
    """
    Build a PlatformConfig from defaults, the settings file and the environment.

    Invalid values in the file are dropped with a warning so their defaults apply.
    Invalid environment values raise pydantic's ValidationError.
    """
    path = path or SETTINGS_FILE
    values = _read_settings_file(path)
    try:
        return PlatformConfig(**values)
    except SettingsValidationError as err:
        invalid = {str(e["loc"][0]) for e in err.errors() if e["loc"]}
        bad_file_keys = invalid & set(values)
        if not bad_file_keys:
            raise
        for key in sorted(bad_file_keys):
            Log.warn(f"Invalid {key} value {values[key]!r} in {path}, using default")
        return PlatformConfig(**{k: v for k, v in values.items() if k not in bad_file_keys})


def save_settings(config: PlatformConfig, path: Optional[Path] = None) -> None:
    """
    Persist settings to disk. The platform secret is never written.
    """
    path = path or SETTINGS_FILE
    settings = config.model_dump(exclude={"platform_secret"})
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(settings, indent=2, sort_keys=True),
            encoding="utf-8",
        )
    except OSError as err:
        Log.warn(f"Failed to write settings file ({path}): {err}")
        return
    Log.info(f"Saved platform settings: {path}")


_default_config: Optional[PlatformConfig] = None


def get_config() -> PlatformConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _default_config
    if _default_config is None:
        _default_config = load_settings()
    return _default_config


def set_config(config: PlatformConfig) -> None:
    global _default_config
    _default_config = config


def reset_config() -> None:
    """Forget the process-wide configuration so the next get_config() reloads it."""
    global _default_config
    _default_config = None
