"""Configuration management for Nencho.

Settings live in settings.json - machine-specific tool preferences:
   - default_output_format: "text" or "json" for CLI output
   - log_level: DEBUG, INFO, WARNING, ... (LOG_LEVEL env var wins)

Config directory resolution:
1. NENCHO_CONFIG_PATH environment variable (if set)
2. ~/.config/nencho/ (XDG_CONFIG_HOME fallback)

Every value read from or written to settings.json passes through the same
KNOWN_SETTINGS check, so a hand-edited file with a stale key or a bad value
falls back to defaults instead of leaking into the CLI.

The calculation engine never reads configuration; only the CLI and MCP
surfaces do.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

APP_NAME = "nencho"
SETTINGS_FILENAME = "settings.json"

OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# key -> allowed values
KNOWN_SETTINGS = {
    "default_output_format": OUTPUT_FORMATS,
    "log_level": LOG_LEVELS,
}
SETTING_DEFAULTS = {
    "default_output_format": "text",
    "log_level": "WARNING",
}


class SettingsError(Exception):
    """Raised when a setting key or value is not recognized."""
    pass


def get_config_dir() -> Path:
    """Config directory: NENCHO_CONFIG_PATH, else $XDG_CONFIG_HOME/nencho."""
    override = os.environ.get("NENCHO_CONFIG_PATH")
    if override:
        return Path(override)
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / APP_NAME


def get_settings_path() -> Path:
    return get_config_dir() / SETTINGS_FILENAME


def normalize_setting(key: str, value: Any) -> str:
    """Check KEY against KNOWN_SETTINGS and return the canonical VALUE.

    log_level is case-insensitive and stored uppercase.

    Raises:
        SettingsError: Unknown key or value not in the allowed choices
    """
    if key not in KNOWN_SETTINGS:
        raise SettingsError(
            f"Unknown setting '{key}'. Known settings: {', '.join(sorted(KNOWN_SETTINGS))}"
        )
    value = str(value)
    if key == "log_level":
        value = value.upper()
    choices = KNOWN_SETTINGS[key]
    if value not in choices:
        raise SettingsError(f"Invalid value '{value}' for {key}. Choices: {', '.join(choices)}")
    return value


def _read_settings_file(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable {path}: {e}")
        return {}
    if not isinstance(raw, dict):
        logger.warning(f"Ignoring {path}: expected a JSON object")
        return {}
    return raw


def load_settings() -> dict:
    """Known, valid settings from settings.json.

    Unknown keys and invalid values are skipped with a warning. A missing
    file yields an empty dict.
    """
    path = get_settings_path()
    if not path.exists():
        return {}

    settings = {}
    for key, value in _read_settings_file(path).items():
        try:
            settings[key] = normalize_setting(key, value)
        except SettingsError as e:
            logger.warning(f"{path.name}: {e}")
    return settings


def save_settings(settings: dict) -> Path:
    """Write settings to settings.json, creating the directory if needed."""
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, indent=2) + "\n", encoding="utf-8")
    return path


def get_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    """Configured value for KEY, else DEFAULT, else the built-in default."""
    value = load_settings().get(key)
    if value is not None:
        return value
    if default is not None:
        return default
    return SETTING_DEFAULTS.get(key)


def set_setting(key: str, value: str) -> Path:
    """Validate and store one setting. Returns the settings file path."""
    canonical = normalize_setting(key, value)
    settings = load_settings()
    settings[key] = canonical
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting. Returns True if it was present."""
    settings = load_settings()
    if settings.pop(key, None) is None:
        return False
    save_settings(settings)
    return True


def get_output_format() -> str:
    """Default CLI output format ("text" unless configured)."""
    return get_setting("default_output_format")


def configure_logging() -> None:
    """Configure stdlib logging from LOG_LEVEL env var or the log_level setting."""
    level_name = os.environ.get("LOG_LEVEL") or get_setting("log_level")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
