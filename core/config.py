"""
Configuration for Owl.

Settings live in a YAML file, optionally nested under an ``owl:`` key.
Anything missing falls back to the defaults below.
"""

import os
from typing import Optional, Dict, Any
from pathlib import Path
import yaml


DEFAULTS: Dict[str, Any] = {
    "start_directory": None,
    "audit_log": "data/audit_log.jsonl",
    "encoding": "utf-8",
    "show_hidden": True,
    "confirm_delete": True,
    "atomic_writes": False,
}


class BrowserConfig:
    """
    Settings for the file browser.

    Loaded once at startup; ``save()`` writes the current values back.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        self.settings: Dict[str, Any] = dict(DEFAULTS)
        self.settings.update(self._load_config())

    def _load_config(self) -> Dict[str, Any]:
        """Load known keys from the YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}

        if not isinstance(config, dict):
            return {}
        config = config.get("owl", config)
        if not isinstance(config, dict):
            return {}
        return {key: value for key, value in config.items() if key in DEFAULTS}

    @property
    def start_directory(self) -> str:
        """Directory a new session starts in; the cwd unless configured."""
        configured = self.settings.get("start_directory")
        if configured:
            path = os.path.abspath(os.path.expanduser(str(configured)))
            if os.path.isdir(path):
                return path
        return os.getcwd()

    @property
    def audit_log(self) -> str:
        return str(self.settings["audit_log"])

    @property
    def encoding(self) -> str:
        return str(self.settings["encoding"])

    @property
    def show_hidden(self) -> bool:
        return bool(self.settings["show_hidden"])

    @property
    def confirm_delete(self) -> bool:
        return bool(self.settings["confirm_delete"])

    @property
    def atomic_writes(self) -> bool:
        return bool(self.settings["atomic_writes"])

    def set(self, key: str, value: Any) -> None:
        """
        Change a setting.

        Args:
            key: One of the known setting names
            value: New value; "true"/"false" strings become booleans

        Raises:
            KeyError: If the key is unknown
        """
        if key not in DEFAULTS:
            raise KeyError(f"Unknown setting: {key}")
        if isinstance(value, str) and isinstance(DEFAULTS[key], bool):
            value = value.strip().lower() in ("1", "true", "yes", "on")
        self.settings[key] = value

    def save(self, path: Optional[str] = None) -> None:
        """Save current settings to file, keeping unrelated top-level keys."""
        target = Path(path) if path else self.config_path
        config: Dict[str, Any] = {"owl": dict(self.settings)}

        if target.exists():
            try:
                with open(target, "r", encoding="utf-8") as f:
                    existing = yaml.safe_load(f) or {}
                if isinstance(existing, dict):
                    if "owl" not in existing:
                        # flat file: its settings move under owl:
                        for key in DEFAULTS:
                            existing.pop(key, None)
                    existing["owl"] = config["owl"]
                    config = existing
            except (OSError, yaml.YAMLError):
                pass

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            yaml.dump(config, f, default_flow_style=False)
