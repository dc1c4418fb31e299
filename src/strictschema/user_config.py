"""User-level configuration for strictschema defaults.

Reads from ~/.config/strictschema/config.yaml and provides defaults for the
command line interface (output indentation, request model and API style).
"""

import logging
from enum import Enum, StrEnum
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "strictschema"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class ApiStyle(StrEnum):
    """Request body layout used by ``strictschema request``."""

    RESPONSES = "responses"
    CHAT = "chat"


# Keys that map to enum types for validation
_ENUM_FIELDS: dict[str, type[Enum]] = {
    "api": ApiStyle,
}

DEFAULTS: dict[str, Any] = {
    "indent": 2,
    "default_model": "gpt-4o-mini",
    "api": ApiStyle.RESPONSES.value,
}


def get_config_path() -> Path:
    """Return the path to the user config file."""
    return CONFIG_FILE


def load_user_config() -> dict[str, Any]:
    """Load user configuration from disk.

    Returns an empty dict if the file doesn't exist or is invalid.
    """
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load user config from {config_path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"User config is not a mapping: {config_path}")
        return {}

    validated: dict[str, Any] = {}
    for key, value in data.items():
        if key not in DEFAULTS:
            logger.warning(f"Unknown key '{key}' in user config, ignoring it")
            continue
        if key in _ENUM_FIELDS and value is not None:
            try:
                _ENUM_FIELDS[key](value)
            except ValueError:
                valid = [e.value for e in _ENUM_FIELDS[key]]
                logger.warning(
                    f"Invalid value '{value}' for '{key}' in user config. Valid: {valid}"
                )
                continue
        if key == "indent" and (not isinstance(value, int) or isinstance(value, bool) or value < 0):
            logger.warning(f"Invalid value '{value}' for 'indent' in user config")
            continue
        validated[key] = value

    return validated


def get_setting(key: str) -> Any:
    """Return a user setting, falling back to the built-in default."""
    return load_user_config().get(key, DEFAULTS[key])


def save_user_config(config: dict[str, Any]) -> Path:
    """Save configuration to the user config file.

    Returns the path written to.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
    return config_path


def get_default_config_template() -> dict[str, Any]:
    """Return an example config for scaffolding."""
    return dict(DEFAULTS)
