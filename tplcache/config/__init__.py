"""
Configuration loading for the template engine.
"""

from __future__ import annotations

from .load import CACHING_ENV, load_config
from .model import EngineConfig
from .paths import CFG_FILE, config_path

__all__ = [
    "EngineConfig",
    "load_config",
    "CACHING_ENV",
    "CFG_FILE",
    "config_path",
]
