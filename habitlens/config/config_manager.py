# habitlens/config/config_manager.py
'''
config_manager.py - Read-only configuration for habitlens
'''
from importlib.resources import files
import logging
import os
from pathlib import Path
from typing import Any, Dict

import toml

logger = logging.getLogger(__name__)

ENV_VAR = "HABITLENS_CONFIG"

if "BASE_DIR" not in globals():
    BASE_DIR = Path.home() / ".habitlens"

if "USER_CONFIG" not in globals():
    USER_CONFIG = BASE_DIR / "config.toml"

if "DEFAULT_CONFIG" not in globals():
    # the shipped defaults, read from package resources
    DEFAULT_CONFIG = files("habitlens.config") \
        .joinpath("config.toml") \
        .read_text(encoding="utf-8")

MAX_INSIGHTS_LIMIT = 8


def get_config_path() -> Path:
    """
    $HABITLENS_CONFIG if set, else ~/.habitlens/config.toml.
    """
    override = os.getenv(ENV_VAR)
    return Path(override).expanduser() if override else USER_CONFIG


def load_config() -> dict:
    """
    Load the user configuration, falling back to the packaged defaults.
    - A missing user file is not an error; the defaults are used.
    - Unreadable or invalid TOML is logged and the defaults are used.
    User values are layered over the defaults section by section.
    """
    config = toml.loads(DEFAULT_CONFIG)
    path = get_config_path()
    if not path.exists():
        logger.debug(f"No user config at {path}, using packaged defaults")
        return config

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to read config file {path}: {e}", exc_info=True)
        return config
    try:
        user = toml.loads(text)
    except toml.TomlDecodeError as e:
        logger.error(f"Failed to parse TOML from {path}: {e}", exc_info=True)
        return config

    for section, values in user.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def get_config_section(section: str) -> Dict[str, Any]:
    """
    Return the dict for [section] from config.
    On missing or malformed section, returns empty dict.
    """
    sec = load_config().get(section, {})
    if isinstance(sec, dict):
        return sec
    logger.warning(f"get_config_section: section [{section}] is not a dict.")
    return {}


def get_config_value(section: str, key: str, default=None) -> Any:
    """
    Return value for [section][key] in config, or default if missing.
    """
    return get_config_section(section).get(key, default)


def _positive_int(value: Any, name: str, default: int) -> int:
    if isinstance(value, bool):
        value = None
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid [analytics] {name} '{value}', using {default}")
        return default
    if number < 1:
        logger.warning(f"[analytics] {name} must be positive, using {default}")
        return default
    return number


def get_analytics_settings() -> Dict[str, int]:
    """
    Return {"max_insights", "forecast_days"} with defaults applied.
    max_insights is capped at 8.
    """
    section = get_config_section("analytics")
    return {
        "max_insights": min(MAX_INSIGHTS_LIMIT,
                            _positive_int(section.get("max_insights", 8), "max_insights", 8)),
        "forecast_days": _positive_int(section.get("forecast_days", 7), "forecast_days", 7),
    }


def get_log_level() -> str:
    level = get_config_value("logging", "level", "INFO")
    return str(level).upper() if level else "INFO"
