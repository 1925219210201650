"""
Cache storage contract.

The runtime only talks to cache storage through this interface:
load an artifact, check its validity, write a freshly generated one,
delete matching ones. How artifacts are persisted is up to the handler.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .model import SEGMENT_TEXT, CachedArtifact, Segment
from ..types import CachingMode, CompileCheck, TemplateId

if TYPE_CHECKING:
    from ..template import Template

logger = logging.getLogger(__name__)


class CacheResource(ABC):
    """Base class of cache storage handlers."""

    # --------------------------- storage primitives --------------------------- #

    @abstractmethod
    def _read(self, template_id: TemplateId) -> Optional[CachedArtifact]:
        pass

    @abstractmethod
    def _store(self, artifact: CachedArtifact) -> None:
        pass

    @abstractmethod
    def delete(self, resource: Optional[str] = None, cache_id: Optional[str] = None,
               compile_id: Optional[str] = None) -> int:
        """
        Deletes artifacts matching the given identity parts (None = any).

        Returns:
            Number of deleted artifacts
        """
        pass

    # --------------------------- runtime interface --------------------------- #

    def load_artifact(self, tpl: Template) -> Optional[CachedArtifact]:
        return self._read(tpl.template_id)

    def is_valid(self, tpl: Template, artifact: Optional[CachedArtifact] = None) -> bool:
        """
        Checks whether the cached rendering of tpl may be replayed.

        Rules:
        - the artifact exists
        - it has not expired (lifetime -1 never expires; CURRENT mode uses the
          template's lifetime, LIFETIME mode the lifetime saved in the artifact)
        - with compile check ON the source timestamp is unchanged
        - with COMPILED_FILEMTIME the compiled unit is not newer than the artifact
        """
        if artifact is None:
            artifact = self.load_artifact(tpl)
        if artifact is None:
            return False

        lifetime = tpl.cache_lifetime if tpl.caching == CachingMode.CURRENT else artifact.lifetime
        if lifetime >= 0 and time.time() > artifact.timestamp + lifetime:
            logger.debug(f"Cache expired for {tpl.template_id}")
            return False

        if tpl.compile_check == CompileCheck.ON:
            if tpl.source.timestamp != artifact.source_timestamp:
                logger.debug(f"Source changed since cache generation for {tpl.template_id}")
                return False
        elif tpl.compile_check == CompileCheck.COMPILED_FILEMTIME:
            if tpl.compiled.timestamp > artifact.timestamp:
                logger.debug(f"Compiled unit newer than cache for {tpl.template_id}")
                return False
        return True

    def write(self, tpl: Template, segments: List[Segment], nocache_snapshot: Dict[str, Any]) -> CachedArtifact:
        """
        Persists a freshly generated rendering.

        The nocache snapshot replaces whatever the previous artifact held.
        """
        artifact = CachedArtifact(
            template_id=tpl.template_id,
            segments=list(segments),
            nocache_vars=dict(nocache_snapshot),
            timestamp=time.time(),
            lifetime=tpl.cache_lifetime,
            source_timestamp=tpl.source.timestamp,
            has_nocache_code=tpl.compiled.has_nocache_code or any(kind != SEGMENT_TEXT for kind, _ in segments),
        )
        self._store(artifact)
        logger.debug(f"Cache written for {tpl.template_id} ({len(artifact.segments)} segments)")
        return artifact


__all__ = ["CacheResource"]
