#!/usr/bin/env python3
"""
Settings
========
Application defaults from ``lexiforge/configs/app.yaml``.

Retry ceilings and word limits are read through ``get_int_setting``; a bad
value raises ConfigurationError naming its key.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

PACKAGE_ROOT = Path(__file__).resolve().parent
APP_CONFIG_PATH = PACKAGE_ROOT / "configs" / "app.yaml"


@lru_cache(maxsize=1)
def load_app_config() -> dict:
    with open(APP_CONFIG_PATH, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"{APP_CONFIG_PATH.name} must contain a mapping")
    return data or {}


def get_setting(path: str, default: Any = None) -> Any:
    """Get nested setting by dotted path, e.g. ``generation.max_attempts``."""
    node: Any = load_app_config()
    for key in path.split('.'):
        if not isinstance(node, dict):
            return default
        node = node.get(key, default)
    return node


def get_int_setting(path: str, default: int, minimum: int = 1) -> int:
    """Integer setting that must be at least ``minimum``."""
    value = get_setting(path, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigurationError(f"{path} must be an integer >= {minimum}, got {value!r}")
    return value


__all__ = [
    "load_app_config",
    "get_setting",
    "get_int_setting",
    "PACKAGE_ROOT",
    "APP_CONFIG_PATH",
]
