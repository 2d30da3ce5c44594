"""
Configuration loader for YAML-based game configurations.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .game_config import GameConfig, default_config

logger = logging.getLogger(__name__)

WINDOW_KEYS = (
    "registration_window",
    "mafia_vote_window",
    "doctor_window",
    "detective_window",
    "discussion_window",
    "day_vote_window",
    "window_grace",
)


def _validate(config: GameConfig) -> None:
    for key in WINDOW_KEYS:
        value = getattr(config, key)
        if not isinstance(value, (int, float)) or value < 0:
            raise ValueError(f"{key} must be a non-negative number of seconds, got {value!r}")
    max_rounds = config.max_rounds
    if max_rounds is not None and (
        not isinstance(max_rounds, int) or isinstance(max_rounds, bool) or max_rounds < 1
    ):
        raise ValueError(f"max_rounds must be at least 1 or null, got {config.max_rounds!r}")


def config_from_dict(values: Dict[str, Any]) -> GameConfig:
    """
    Build a GameConfig from a mapping. Unknown keys are logged and skipped,
    missing keys keep their defaults.

    Raises:
        ValueError: If ``values`` is not a mapping, a window is negative or
            max_rounds is not an integer of at least 1
    """
    if not isinstance(values, Mapping):
        raise ValueError(f"Config must be a mapping of keys to values, got {type(values).__name__}")
    known = {f.name for f in dataclasses.fields(GameConfig)}
    for key in sorted(set(values) - known):
        logger.warning("Unknown config key '%s' ignored", key)

    config = GameConfig(**{key: value for key, value in values.items() if key in known})
    _validate(config)
    return config


def load_config_from_yaml(config_path: Union[str, Path]) -> GameConfig:
    """
    Load game configuration from a YAML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValueError: If a value is out of range
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open() as f:
        values = yaml.safe_load(f) or {}
    return config_from_dict(values)


def load_config(config_path: Optional[Union[str, Path]] = None) -> GameConfig:
    """YAML config at ``config_path``, or the shared default when no path is given."""
    if config_path is None:
        return default_config
    return load_config_from_yaml(config_path)
