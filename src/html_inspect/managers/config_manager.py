# src/html_inspect/managers/config_manager.py
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import StrictStr, TypeAdapter, ValidationError

from html_inspect.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

# Shapes of the settings the collectors read at call time.
SETTING_TYPES: Dict[str, TypeAdapter] = {
    "debug.level": TypeAdapter(StrictStr),
    "meta.classic_names": TypeAdapter(List[StrictStr]),
    "opengraph.prefixes": TypeAdapter(List[StrictStr]),
    "references.pairs": TypeAdapter(List[Tuple[StrictStr, StrictStr]]),
}


class ConfigManager:
    """
    A singleton class to manage the extraction configuration.
    It loads settings from the bundled settings.json and allows for in-memory modifications,
    e.g. extending the recognized meta names or the reference table.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """Loads the configuration from the file."""
        self._config: Dict[str, Any] = {}
        self.reset()
        logger.debug("ConfigManager initialized.")

    def get_all(self) -> Dict[str, Any]:
        """Returns the entire current configuration dictionary."""
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Safely retrieves a nested value from the configuration.
        e.g., 'meta.classic_names'.
        """
        keys = key_path.split('.')
        value = self._config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
        return value if value is not None else default

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets a nested value in the in-memory configuration.
        e.g., 'opengraph.prefixes', ['og:', 'fb:']

        Values for the extraction vocabularies are validated first; a rejected
        value leaves the configuration unchanged and returns False.
        """
        adapter = SETTING_TYPES.get(key_path)
        if adapter is not None:
            try:
                value = adapter.validate_python(value)
            except ValidationError as e:
                logger.error("Rejected value for '%s': %s", key_path, e)
                return False

        keys = key_path.split('.')
        d = self._config
        # Navigate to the second-to-last dictionary
        for key in keys[:-1]:
            d = d.setdefault(key, {})
            if not isinstance(d, dict):
                logger.error("Cannot set value: '%s' is not a dictionary.", key)
                return False

        d[keys[-1]] = value
        logger.debug("Configuration updated: %s = %s", key_path, value)
        return True

    def reset(self):
        """Resets the in-memory configuration from the settings.json file."""
        config_path = PathUtils.get_settings_file()
        if not config_path.exists():
            logger.warning("settings.json not found at %s. Using built-in defaults.", config_path)
            self._config = {}
            return
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load settings.json: %s", e, exc_info=True)
            self._config = {}
            return
        logger.debug("Configuration has been (re)loaded from settings.json.")


# The global singleton instance used by all collectors.
config_manager = ConfigManager()
