# wavefactory/services/configuration_manager.py
"""
Contains the ConfigurationManager, the service for loading, validating and
saving the toolkit's YAML configuration.
"""
import copy
import logging
from typing import Any, Optional

import numpy as np
import yaml

from wavefactory.config.constants import DEFAULT_SETTINGS, MAX_FADE_RATIO


class ConfigurationManager:
    """
    Loads the YAML configuration file on top of DEFAULT_SETTINGS and writes
    back only the values that differ from the defaults.
    """

    def __init__(self):
        self.settings: dict = copy.deepcopy(DEFAULT_SETTINGS)

    def load_config(self, filepath: str) -> dict:
        """
        Loads, validates, and migrates a configuration from a YAML file.

        A missing file is created with the defaults. A file that cannot be
        parsed is left untouched and the defaults are used. If sanitizing
        changed the loaded values the file is re-saved.

        Args:
            filepath: The path to the YAML file to load.

        Returns:
            The complete, validated settings dictionary.
        """
        loaded_raw = self._read_yaml_file(filepath)
        if loaded_raw == 'created':
            self.settings = copy.deepcopy(DEFAULT_SETTINGS)
            return self.settings

        if loaded_raw is not None and not isinstance(loaded_raw, dict):
            logging.warning("Config %s is not a mapping. Using defaults.",
                            filepath)
            loaded_raw = None

        final_settings, changed1 = self._sanitize_settings(loaded_raw or {})
        final_settings, changed2 = self._validate_values(final_settings)
        self.settings = final_settings

        if loaded_raw is not None and (changed1 or changed2):
            logging.info("Config auto-migrated. Re-saving %s.", filepath)
            self.save_config(filepath, final_settings)
        return self.settings

    def save_config(self, filepath: str, settings: Optional[dict] = None):
        """
        Saves only the settings that differ from the defaults to a YAML file.

        Args:
            filepath: The path to the YAML file to save.
            settings: The settings to save; defaults to the loaded settings.
        """
        settings = self.settings if settings is None else settings
        settings_diff = self._get_diff(settings, DEFAULT_SETTINGS)
        sanitized_settings = self._sanitize_for_yaml(settings_diff)

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                if sanitized_settings:
                    yaml.dump(sanitized_settings, f, sort_keys=False)
                else:
                    f.write('')
        except IOError as e:
            logging.error("Error writing config %s: %s", filepath, e)

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def _read_yaml_file(self, filepath: str) -> Optional[Any]:
        """Reads and parses a YAML file, handling errors."""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f)
        except FileNotFoundError:
            logging.info("Config file not found, creating with defaults: %s",
                         filepath)
            self.save_config(filepath, DEFAULT_SETTINGS)
            return 'created'
        except yaml.YAMLError as e:
            logging.warning("Error parsing %s: %s. Using defaults.",
                            filepath, e)
            return None

    def _sanitize_settings(self, loaded_settings: dict) -> tuple[dict, bool]:
        """Ensures the settings dictionary is complete and has no unknown keys."""
        final_settings, config_changed = {}, False
        for key in loaded_settings:
            if key not in DEFAULT_SETTINGS:
                logging.warning("Dropping unknown config key '%s'.", key)
                config_changed = True
        for key, default_value in DEFAULT_SETTINGS.items():
            if key in loaded_settings:
                final_settings[key] = loaded_settings[key]
            else:
                final_settings[key] = copy.deepcopy(default_value)
        return final_settings, config_changed

    def _validate_values(self, settings: dict) -> tuple[dict, bool]:
        """Replaces out-of-range or mistyped values with their defaults."""
        config_changed = False
        checks = {
            'sample_rate': _is_positive_int,
            'target_sample_rate': _is_positive_int,
            'fade_ratio': lambda v: _is_number(v) and 0.0 <= v <= MAX_FADE_RATIO,
            'resample_on_load': lambda v: isinstance(v, bool),
            'samples_dir': lambda v: isinstance(v, str) and bool(v),
        }
        for key, is_valid in checks.items():
            if not is_valid(settings.get(key)):
                logging.warning("Invalid value %r for '%s'; using default %r.",
                                settings.get(key), key, DEFAULT_SETTINGS[key])
                settings[key] = copy.deepcopy(DEFAULT_SETTINGS[key])
                config_changed = True
        return settings, config_changed

    def _sanitize_for_yaml(self, data: Any) -> Any:
        """Recursively converts NumPy types to standard Python types for YAML."""
        if isinstance(data, dict): return {k: self._sanitize_for_yaml(v) for k, v in data.items()}
        if isinstance(data, list): return [self._sanitize_for_yaml(i) for i in data]
        if isinstance(data, np.integer): return int(data)
        if isinstance(data, np.floating): return float(data)
        return data

    def _get_diff(self, dict1: dict, dict2: dict) -> dict:
        """Recursively compares two dictionaries and returns the differences."""
        diff = {}
        for key, value1 in dict1.items():
            if key not in dict2 or value1 != dict2[key]:
                if isinstance(value1, dict) and isinstance(dict2.get(key), dict):
                    nested_diff = self._get_diff(value1, dict2[key])
                    if nested_diff: diff[key] = nested_diff
                else:
                    diff[key] = value1
        return diff


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, np.number)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool) and value > 0
