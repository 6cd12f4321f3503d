"""
ts2net Configuration
====================

Package defaults live in defaults.yaml next to this module. A user file
named by the TS2NET_CONFIG environment variable is merged over them.

Usage:
    from ts2net.config import get_config

    fmt = get_config().get('partition.record_format', 'parquet')

Explicit function arguments always take precedence over configuration.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULTS_PATH = Path(__file__).parent / 'defaults.yaml'
ENV_VAR = 'TS2NET_CONFIG'


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> Dict[str, Any]:
    with open(path) as f:
        raw = yaml.safe_load(f)
    return raw or {}


class Config:
    """Nested configuration with dotted-key access."""

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    def get(self, key: str, default: Any = None) -> Any:
        """Look up 'section.name'; default when any level is missing."""
        node: Any = self._data
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._data)


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load defaults and merge an override file.

    Args:
        path: Override YAML; falls back to $TS2NET_CONFIG when None

    Returns:
        Config
    """
    data = _load_yaml(DEFAULTS_PATH)

    override = path or os.environ.get(ENV_VAR)
    if override:
        override = Path(override)
        if not override.exists():
            raise FileNotFoundError(f"Config file not found: {override}")
        data = _deep_merge(data, _load_yaml(override))

    return Config(data)


# Global config instance (lazy initialized)
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or load the global configuration."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config():
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
