"""Configuration file management for millpane."""

from __future__ import annotations

import copy
import os
import sys
from pathlib import Path
from typing import Any, Dict

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore

import tomli_w

# Default configuration file location
CONFIG_FILE = Path.home() / ".millpane.toml"

# Default configuration
DEFAULT_CONFIG = {
    "display": {
        "outlines": True,
        "scroll_speed": 8,
    },
    "scripts": {
        "extension": "py",
        "interpreter": "python3",
    },
    "editor": {
        # Empty means $VISUAL, then $EDITOR, then vi
        "command": "",
    },
    "navigation": {
        "home_directory": "~",
    },
    "colors": {
        "directory": "blue",
        "script": "green",
        "plain": "white",
        "border": "gray",
        "current_directory": "yellow",
        "status": "white",
    },
    "logging": {
        "enabled": False,
        "file": "~/.millpane.log",
        "level": "DEBUG",
    },
    "session": {
        "last_directory": ".",
    },
}


def load_config() -> Dict[str, Any]:
    """Load configuration from file or return defaults."""
    if not CONFIG_FILE.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(CONFIG_FILE, "rb") as f:
            config = tomllib.load(f)
        # Merge with defaults to ensure all keys exist
        return _merge_config(DEFAULT_CONFIG, config)
    except (OSError, tomllib.TOMLDecodeError):
        # If config is corrupted, return defaults
        return copy.deepcopy(DEFAULT_CONFIG)


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file."""
    try:
        CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "wb") as f:
            tomli_w.dump(config, f)
    except (OSError, TypeError) as err:
        # Don't break the app if config save fails, but inform the user
        print(f"Warning: Failed to save configuration to {CONFIG_FILE}: {err}", file=sys.stderr)


def _merge_config(default: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    """Merge user config with defaults, preserving user values."""
    result = copy.deepcopy(default)
    for key, value in user.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_config(result[key], value)
        else:
            result[key] = value
    return result


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name)
    if not isinstance(section, dict):
        return copy.deepcopy(DEFAULT_CONFIG[name])
    return section


def get_display_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Get outline and scroll settings."""
    section = _section(config or load_config(), "display")
    scroll_speed = section.get("scroll_speed", DEFAULT_CONFIG["display"]["scroll_speed"])
    if not isinstance(scroll_speed, int) or scroll_speed < 1:
        scroll_speed = DEFAULT_CONFIG["display"]["scroll_speed"]
    return {
        "outlines": bool(section.get("outlines", True)),
        "scroll_speed": scroll_speed,
    }


def get_script_settings(config: Dict[str, Any] | None = None) -> Dict[str, str]:
    """Get the recognized script extension and the interpreter used to run it."""
    section = _section(config or load_config(), "scripts")
    extension = str(section.get("extension", DEFAULT_CONFIG["scripts"]["extension"]))
    return {
        "extension": extension.lstrip("."),
        "interpreter": str(section.get("interpreter", "")),
    }


def get_editor_command(config: Dict[str, Any] | None = None) -> str:
    """Get the editor command, falling back to the environment."""
    section = _section(config or load_config(), "editor")
    command = str(section.get("command", "")).strip()
    if command:
        return command
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"


def get_home_directory(config: Dict[str, Any] | None = None) -> Path:
    """Get the target directory of the jump-home command."""
    section = _section(config or load_config(), "navigation")
    raw = str(section.get("home_directory", "~"))
    return Path(raw).expanduser()


def get_color_names(config: Dict[str, Any] | None = None) -> Dict[str, str]:
    """Get color names keyed by screen role."""
    section = _section(config or load_config(), "colors")
    colors = dict(DEFAULT_CONFIG["colors"])
    colors.update({key: str(value) for key, value in section.items()})
    return colors


def get_logging_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Get the diagnostic log settings."""
    section = _section(config or load_config(), "logging")
    return {
        "enabled": bool(section.get("enabled", False)),
        "file": Path(str(section.get("file", DEFAULT_CONFIG["logging"]["file"]))).expanduser(),
        "level": str(section.get("level", "DEBUG")).upper(),
    }


def create_default_config() -> None:
    """Create default configuration file if it doesn't exist."""
    if CONFIG_FILE.exists():
        return

    save_config(DEFAULT_CONFIG)


def get_last_directory() -> str:
    """Get last used directory from session state."""
    config = load_config()
    session = config.get("session", {})
    return session.get("last_directory", ".")


def save_last_directory(directory: str) -> None:
    """Save last used directory to session state."""
    config = load_config()
    if "session" not in config:
        config["session"] = {}
    config["session"]["last_directory"] = directory
    save_config(config)


__all__ = [
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
    "get_display_settings",
    "get_script_settings",
    "get_editor_command",
    "get_home_directory",
    "get_color_names",
    "get_logging_settings",
    "create_default_config",
    "get_last_directory",
    "save_last_directory",
]
