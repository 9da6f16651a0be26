"""Configuration management for livebattery."""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)


# Default configuration values
DEFAULTS = {
    # Sampling
    "polling": {
        "interval_seconds": 15,  # How often the tray refreshes
    },

    # Elevated sysfs reads (su -c cat <path>)
    "privileged_read": {
        "enabled": True,
        "command": ["su", "-c"],
        "timeout_seconds": 2.0,  # Hung su calls are killed after this
        "first": True,  # Try su before the plain read
    },

    # Where battery level/temperature snapshots come from
    "sources": {
        "upower": True,
        "sysfs": True,
    },

    # Device identity for capacity fallback ("" = detect)
    "device": {
        "model": "",
        "codename": "",
    },

    # Extra model/codename -> design capacity (mAh), checked before built-ins
    "device_profiles": {},
    "generic_capacity_mah": 4000.0,

    # Extra sysfs candidates, tried before the built-in ones
    "paths": {
        "current_now": [],
        "charge_full_design": [],
        "temp": [],
    },

    # Desktop notification via notify-send
    "notifications": {
        "enabled": False,
        "urgency": "low",
    },

    # Tray icon appearance
    "tray": {
        "show_percentage_text": True,  # Show % number on icon
        "font_point_size": 10,  # Base size for the rich-text tooltip
    },
}


def get_config_dir() -> Path:
    """Get the configuration directory, creating it if needed."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        config_dir = Path(xdg_config) / "livebattery"
    else:
        config_dir = Path.home() / ".config" / "livebattery"

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    return get_config_dir() / "config.json"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base, returning new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config() -> dict:
    """Load configuration from file, merging with defaults."""
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                user_config = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load config from %s: %s", config_path, e)
            return copy.deepcopy(DEFAULTS)
        if not isinstance(user_config, dict):
            log.warning("Ignoring config %s: top level is not an object", config_path)
            return copy.deepcopy(DEFAULTS)
        return _deep_merge(DEFAULTS, user_config)

    # Create default config file on first run
    save_config(DEFAULTS)
    return copy.deepcopy(DEFAULTS)


def save_config(config: dict) -> bool:
    """Save configuration to file."""
    config_path = get_config_path()

    try:
        with open(config_path, "w") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError as e:
        log.error("Could not save config to %s: %s", config_path, e)
        return False


def get(config: dict, key: str, default: Any = None) -> Any:
    """Get a config value using dot notation (e.g., 'polling.interval_seconds')."""
    keys = key.split(".")
    value = config

    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


class Config:
    """Configuration accessor with attribute-style access."""

    def __init__(self, data: dict = None):
        self._config = data if data is not None else load_config()

    @property
    def data(self) -> dict:
        return self._config

    @property
    def polling(self) -> dict:
        return self._config.get("polling", DEFAULTS["polling"])

    @property
    def notifications(self) -> dict:
        return self._config.get("notifications", DEFAULTS["notifications"])

    @property
    def tray(self) -> dict:
        return self._config.get("tray", DEFAULTS["tray"])

    def __getitem__(self, key: str) -> Any:
        return get(self._config, key)
