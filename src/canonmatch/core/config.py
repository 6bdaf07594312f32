# src/canonmatch/core/config.py
"""
Configuration schema and loading for canonmatch.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field


class LoggingSettings(BaseModel):
    """Logging behaviour when canonmatch runs inside a test session.

    Disabled by default: the host test runner usually owns logging setup.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    enabled: bool = Field(default=False, description="Configure structlog on pytest startup")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console output")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")


class CanonMatchSettings(BaseModel):
    """Top-level settings.

    Example YAML:
        max_reported_rows: 10
        max_raw_text_length: 200
        logging:
          enabled: true
          level: DEBUG
    """

    model_config = {"frozen": True, "extra": "forbid"}

    max_reported_rows: int = Field(
        default=5,
        gt=0,
        description="Candidate rows shown in a database assertion failure",
    )
    max_raw_text_length: int = Field(
        default=500,
        gt=0,
        description="Stored text longer than this is truncated in error messages",
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


_active_settings: CanonMatchSettings | None = None


def get_settings() -> CanonMatchSettings:
    """Return the process-wide settings, creating defaults on first use."""
    global _active_settings
    if _active_settings is None:
        _active_settings = CanonMatchSettings()
    return _active_settings


def use_settings(settings: CanonMatchSettings | None) -> None:
    """Replace the process-wide settings. ``None`` resets to defaults."""
    global _active_settings
    _active_settings = settings


def load_settings(config_path: Path) -> CanonMatchSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (CANONMATCH_*) - highest priority
    2. Config file (YAML)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: CANONMATCH_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated CanonMatchSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Explicit check for file existence (Dynaconf silently accepts missing files)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="CANONMATCH",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; convert to lowercase for Pydantic
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return CanonMatchSettings(**raw_config)


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    return value
