"""
Helpers for building engines and inspecting their state in tests.
"""

from __future__ import annotations

from typing import Optional

from tplcache import Engine
from tplcache.cache.model import CachedArtifact


def cached_artifact(engine: Engine, resource: str, cache_id: Optional[str] = None,
                    compile_id: Optional[str] = None) -> Optional[CachedArtifact]:
    """Reads the stored artifact of a template without rendering it."""
    tpl = engine.create_template(resource, cache_id, compile_id)
    return engine.get_cache_resource().load_artifact(tpl)


def render_depth(engine: Engine) -> int:
    """Current output capture depth of the engine."""
    return engine.output.level


__all__ = ["cached_artifact", "render_depth"]
