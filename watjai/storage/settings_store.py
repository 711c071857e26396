"""Persisted key-value settings (last-used device address)."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEVICE_ADDRESS_KEY = "device_address"


class SettingsStore:
    """Small YAML-backed store that survives between sessions."""

    def __init__(self, settings_path: str):
        """Initialize settings store.

        Args:
            settings_path: Path of the YAML file holding the settings
        """
        self.settings_path = Path(settings_path)
        self.settings: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.settings_path.exists():
            return {}

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read settings from {self.settings_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed settings file: {self.settings_path}")
            return {}
        return data

    def save(self) -> None:
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(self.settings, f, default_flow_style=False)
        logger.debug(f"Settings saved: {self.settings_path}")

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.settings[key] = value
        self.save()

    def get_device_address(self) -> Optional[str]:
        return self.get(DEVICE_ADDRESS_KEY)

    def set_device_address(self, address: str) -> None:
        self.set(DEVICE_ADDRESS_KEY, address)
        logger.info(f"Saved device address: {address}")
