"""
Configuration management for fibcalc.

Settings are read from a YAML file and merged over built-in defaults.
The file is looked up in this order:

1. the path passed explicitly (``fibcalc --config PATH``)
2. ``$FIBCALC_CONFIG``
3. ``~/.config/fibcalc/config.yaml``

String values may reference environment variables as ``${VAR}`` or
``${VAR:-default}``.
"""

import copy
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FIBCALC_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/fibcalc/config.yaml")

_ENV_PATTERN = re.compile(r'\$\{([^:}]+)(?::-?([^}]*))?\}')


def default_config() -> Dict[str, Any]:
    """Return a fresh copy of the built-in settings."""
    return {
        'engine': {
            'executor': 'process',
            'max_workers': None,
            'parallel_min_bits': 65536,
        },
        'render': {
            'threshold_exponent': 35,
            'significant_digits': 5,
        },
        'logging': {
            'level': 'WARNING',
        },
    }


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Holds the effective configuration."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self.config_path = self._resolve_path(config_path)
        self._config: Dict[str, Any] = default_config()
        self.reload()

    @staticmethod
    def _resolve_path(config_path: Optional[Union[str, Path]]) -> Path:
        if config_path:
            return Path(config_path).expanduser()
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path).expanduser()
        return DEFAULT_CONFIG_PATH.expanduser()

    def reload(self) -> None:
        """Re-read the configuration file, falling back to defaults."""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ValueError(f"top-level YAML value must be a mapping, got {type(loaded).__name__}")

            self._config = _deep_merge(default_config(), self._expand_env_vars(loaded))
            logger.info({"event": "config_loaded", "path": str(self.config_path)})
        except FileNotFoundError:
            logger.info({"event": "config_missing", "path": str(self.config_path), "using": "defaults"})
            self._config = default_config()
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.error({"event": "config_invalid", "path": str(self.config_path), "error": str(e), "using": "defaults"})
            self._config = default_config()

    def _expand_env_vars(self, config: Any) -> Any:
        """Expand ``${VAR:-default}`` references in string values."""
        if isinstance(config, dict):
            return {k: self._expand_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._expand_env_vars(item) for item in config]
        elif isinstance(config, str):
            def replacer(match):
                var_name = match.group(1)
                default_value = match.group(2) or ''
                return os.environ.get(var_name, default_value)

            expanded = _ENV_PATTERN.sub(replacer, config)
            if expanded != config:
                # a whole-value reference such as "${FIB_DIGITS:-5}" should yield a number
                try:
                    return yaml.safe_load(expanded) if expanded else None
                except yaml.YAMLError:
                    return expanded
            return expanded
        else:
            return config

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Look up a nested value with dot notation.

        Args:
            key_path: path such as ``"render.significant_digits"``
            default: returned when the key is missing

        Returns:
            The configured value or ``default``.
        """
        value = self._config
        try:
            for key in key_path.split('.'):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def update_runtime(self, key_path: str, value: Any) -> None:
        """Override a value for this process only (nothing is written back)."""
        keys = key_path.split('.')
        config = self._config
        for key in keys[:-1]:
            if not isinstance(config.get(key), dict):
                config[key] = {}
            config = config[key]
        config[keys[-1]] = value
        logger.debug({"event": "config_override", "key": key_path, "value": value})

    def get_engine_config(self) -> Dict[str, Any]:
        return self.get('engine', {})

    def get_render_config(self) -> Dict[str, Any]:
        return self.get('render', {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self.get('logging', {})

    @property
    def config(self) -> Dict[str, Any]:
        """A copy of the whole configuration."""
        return copy.deepcopy(self._config)


_config_manager: Optional[ConfigManager] = None


def get_config(config_path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Return the process-wide configuration, loading it on first use."""
    global _config_manager
    if _config_manager is None or (config_path and Path(config_path).expanduser() != _config_manager.config_path):
        _config_manager = ConfigManager(config_path)
    return _config_manager


def reset_config() -> None:
    """Forget the process-wide configuration."""
    global _config_manager
    _config_manager = None
