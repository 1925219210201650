from __future__ import annotations

from pathlib import Path

# Single source of truth for configuration file locations.
CFG_FILE = "tplcache.yaml"
CACHE_DIR = ".tplcache"


def config_path(root: Path) -> Path:
    """Path to the engine configuration file <root>/tplcache.yaml."""
    return (root / CFG_FILE).resolve()


__all__ = ["CFG_FILE", "CACHE_DIR", "config_path"]
