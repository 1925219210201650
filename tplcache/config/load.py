from __future__ import annotations

import logging
import os
from pathlib import Path

from ruamel.yaml import YAML

from .model import EngineConfig
from .paths import config_path
from ..types import coerce_caching

logger = logging.getLogger(__name__)

_yaml = YAML(typ="safe")

CACHING_ENV = "TPLCACHE_CACHING"


def _read_yaml_map(path: Path) -> dict:
    """Reads a YAML file that must hold a mapping (missing file = empty mapping)."""
    if not path.is_file():
        return {}
    raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise RuntimeError(f"YAML must be a mapping: {path}")
    return raw


def load_config(root: Path) -> EngineConfig:
    """
    Loads <root>/tplcache.yaml.

    A missing file yields the defaults. The TPLCACHE_CACHING environment
    variable overrides the `caching` key.

    Args:
        root: Directory holding the configuration file

    Returns:
        Engine configuration

    Raises:
        RuntimeError: Malformed file, unknown keys or bad values
    """
    root = Path(root)
    path = config_path(root)
    raw = _read_yaml_map(path)
    cfg = EngineConfig.from_dict(raw, base_dir=root.resolve())

    env = os.environ.get(CACHING_ENV)
    if env is not None and env.strip():
        try:
            cfg.caching = coerce_caching(env)
        except ValueError as e:
            raise RuntimeError(f"{CACHING_ENV}: {e}") from None
        logger.debug(f"caching overridden by {CACHING_ENV}={env}")
    return cfg


__all__ = ["load_config", "CACHING_ENV"]
