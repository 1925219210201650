from __future__ import annotations

import copy
from typing import Dict, Optional

from .base import CacheResource
from .model import CachedArtifact, id_matches
from ..types import TemplateId


class MemoryCacheResource(CacheResource):
    """
    Process-local cache storage.

    Artifacts are deep-copied in both directions: a replay never shares
    mutable values with the render that generated them.
    """

    def __init__(self):
        self._store_map: Dict[TemplateId, CachedArtifact] = {}

    def _read(self, template_id: TemplateId) -> Optional[CachedArtifact]:
        artifact = self._store_map.get(template_id)
        return copy.deepcopy(artifact) if artifact is not None else None

    def _store(self, artifact: CachedArtifact) -> None:
        self._store_map[artifact.template_id] = copy.deepcopy(artifact)

    def delete(self, resource: Optional[str] = None, cache_id: Optional[str] = None,
               compile_id: Optional[str] = None) -> int:
        doomed = [tid for tid in self._store_map if id_matches(tid, resource, cache_id, compile_id)]
        for tid in doomed:
            del self._store_map[tid]
        return len(doomed)

    def __len__(self) -> int:
        return len(self._store_map)


__all__ = ["MemoryCacheResource"]
