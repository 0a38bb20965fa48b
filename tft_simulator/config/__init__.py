"""
Configuration loading for the TFT display simulator.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from tft_simulator.config.default import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or written."""
    pass


def merge_configs(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    """
    Merge source config into target config.

    Args:
        target: Target configuration to update
        source: Source configuration to merge from
    """
    for key, value in source.items():
        if isinstance(value, dict) and key in target and isinstance(target[key], dict):
            # Recursively update nested dictionaries
            merge_configs(target[key], value)
        else:
            target[key] = value


def get_default_config() -> Dict[str, Any]:
    """Return a private copy of the defaults."""
    return copy.deepcopy(DEFAULT_CONFIG)


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file layered over the defaults.

    Args:
        config_path: Path to the configuration file, or None for defaults only

    Returns:
        Dictionary containing configuration

    Raises:
        ConfigError: If the file is missing or is not a JSON object
    """
    config = get_default_config()
    if config_path is None:
        return config

    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading configuration from {config_path}: {e}")
        raise ConfigError(f"Could not read configuration {config_path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigError(f"Configuration {config_path} must contain a JSON object")

    merge_configs(config, loaded)
    logger.info(f"Loaded configuration from {config_path}")
    return config


def save_config(
    config: Dict[str, Any],
    output_path: Union[str, Path],
    create_dirs: bool = True
) -> None:
    """
    Save configuration to a JSON file.

    Args:
        config: Dictionary containing configuration
        output_path: Path to save the configuration
        create_dirs: Whether to create parent directories if they don't exist
    """
    output_path = Path(output_path)

    if create_dirs:
        output_path.parent.mkdir(exist_ok=True, parents=True)

    try:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=2)
        logger.info(f"Configuration saved to: {output_path}")
    except OSError as e:
        logger.error(f"Error saving configuration to {output_path}: {e}")
        raise ConfigError(f"Could not write configuration {output_path}: {e}") from e


__all__ = [
    'DEFAULT_CONFIG', 'ConfigError', 'merge_configs',
    'get_default_config', 'load_config', 'save_config'
]
