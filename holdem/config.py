# config.py
"""
Table and session configuration.

Defaults live in ``DEFAULT_CONFIG``; a YAML file only needs the keys it
wants to override.
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "table": {
        "small_blind": 1,
        "big_blind": 2,
        "starting_chips": 200,
        "seats": 6,
        "type": "mixed",
    },
    "session": {
        "hands": 100,
        "seed": None,
        "rebuy": True,
        "action_delay": 0.0,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file on top of the defaults.

    Args:
        config_path: Path to the config file, or None for defaults only

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not config_path:
        return config

    try:
        if os.path.exists(config_path):
            with open(config_path, 'r') as f:
                user_config = yaml.safe_load(f)
            if user_config:
                deep_update(config, user_config)
        else:
            logger.info(f"Config file {config_path} not found, using defaults")
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config {config_path}: {e}")
        logger.error("Using default configuration")
        config = copy.deepcopy(DEFAULT_CONFIG)

    return config


def deep_update(base_dict: Dict, update_dict: Dict) -> None:
    """Recursively merge ``update_dict`` into ``base_dict`` in place."""
    for key, value in update_dict.items():
        if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
            deep_update(base_dict[key], value)
        else:
            base_dict[key] = value


def save_config(config: Dict, config_path: str) -> bool:
    """
    Save configuration to a YAML file.

    Returns:
        True if successful, False otherwise
    """
    try:
        config_dir = os.path.dirname(config_path)
        if config_dir and not os.path.exists(config_dir):
            os.makedirs(config_dir)

        with open(config_path, 'w') as f:
            yaml.safe_dump(config, f, default_flow_style=False)
        return True
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error saving config: {e}")
        return False
