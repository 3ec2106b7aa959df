"""
Configuration and Application Paths

Resolves where podterm keeps its files and loads the JSON config and
keybindings, writing defaults on first run.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger("ConfigManager")

KeyBinding = Union[str, List[str]]


class AppPaths:
    """Filesystem layout under the application root."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.cache_dir = self.root / "cache"
        self.log_dir = self.root / "logs"
        self.themes_dir = self.root / "themes"
        self.subscriptions_path = self.root / "subscriptions.json"
        self.state_path = self.root / "state.json"
        self.config_path = self.root / "config.json"
        self.keybindings_path = self.root / "keybindings.json"

    @classmethod
    def create(cls, root: Optional[Union[str, Path]] = None) -> "AppPaths":
        """Resolve the root (argument, PODTERM_HOME, XDG data dir) and create it."""
        if root is None:
            root = os.environ.get("PODTERM_HOME")
        if root is None:
            data_home = os.environ.get("XDG_DATA_HOME") or str(
                Path.home() / ".local" / "share"
            )
            root = Path(data_home) / "podterm"

        paths = cls(Path(root).expanduser())
        paths.root.mkdir(parents=True, exist_ok=True)
        paths.cache_dir.mkdir(exist_ok=True)
        return paths


class ConfigManager:
    """Manages application configuration and keybindings."""

    def __init__(self, paths: AppPaths):
        self.paths = paths
        self.config_file = paths.config_path
        self.keybindings_file = paths.keybindings_path

        self.config: Dict[str, Any] = {}
        self.keybindings: Dict[str, KeyBinding] = {}

        self.load_config()
        self.load_keybindings()

    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file, filling gaps from the defaults."""
        defaults = self._get_default_config()
        if self.config_file.exists():
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("config root must be an object")
            except (OSError, ValueError) as e:
                logger.warning(f"Ignoring unreadable config {self.config_file}: {e}")
                loaded = {}
            self.config = _merge(defaults, loaded)
        else:
            self.config = defaults
            self.save_config()

        return self.config

    def save_config(self):
        """Save configuration to file."""
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self.config, f, indent=2)

    def load_keybindings(self) -> Dict[str, KeyBinding]:
        """Load keybindings from file."""
        defaults = self._get_default_keybindings()
        if self.keybindings_file.exists():
            try:
                with open(self.keybindings_file, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    raise ValueError("keybindings root must be an object")
            except (OSError, ValueError) as e:
                logger.warning(
                    f"Ignoring unreadable keybindings {self.keybindings_file}: {e}"
                )
                loaded = {}
            defaults.update(loaded)
            self.keybindings = defaults
        else:
            self.keybindings = defaults
            self.save_keybindings()

        return self.keybindings

    def save_keybindings(self):
        """Save keybindings to file."""
        with open(self.keybindings_file, "w", encoding="utf-8") as f:
            json.dump(self.keybindings, f, indent=2)

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "ui": {
                "page_size": 15,
                "menu_page_size": 10,
                "tick_seconds": 0.25,
                "theme": "classic",
            },
            "playback": {
                "seek_seconds": 15,
            },
            "download": {
                "timeout_seconds": 1800,
                "socket_timeout": 30,
            },
            "feeds": {
                "timeout_seconds": 30,
            },
        }

    def _get_default_keybindings(self) -> Dict[str, KeyBinding]:
        """Get default keybindings."""
        return {
            "play_pause": ["p", "P", " "],
            "stop": ["s", "S"],
            "seek_backward": "left",
            "seek_forward": "right",
            "cycle_theme": ["t", "T"],
        }

    # Configuration getters
    def get(self, key: str, default: Any = None) -> Any:
        """Get config value by dot-notation key (e.g., 'ui.page_size')."""
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set config value by dot-notation key."""
        keys = key.split(".")
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        self.save_config()

    # Keybinding helpers
    def get_keys_for_action(self, action: str) -> List[str]:
        """Get every key bound to an action."""
        bound = self.keybindings.get(action)
        if bound is None:
            return []
        if isinstance(bound, str):
            return [bound]
        return list(bound)

    def get_action_for_key(self, key: str) -> Optional[str]:
        """Get the action bound to a key."""
        for action in self.keybindings:
            if key in self.get_keys_for_action(action):
                return action
        return None


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged
