from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .base import CacheResource
from .model import CachedArtifact, Segment

if TYPE_CHECKING:
    from ..template import Template

logger = logging.getLogger(__name__)


class CachedHandle:
    """
    Per-template access point to its cached rendering.

    Resolved once per template object. During a cache-generating render it
    also collects the nocache snapshot written by {make_nocache}; the
    collection starts empty on every generation, so values of a previous
    generation never carry over.
    """

    def __init__(self, handler: CacheResource):
        self.handler = handler
        self.artifact: Optional[CachedArtifact] = None
        self._pending_vars: Optional[Dict[str, Any]] = None

    def load(self, tpl: Template) -> Optional[CachedArtifact]:
        self.artifact = self.handler.load_artifact(tpl)
        return self.artifact

    def is_cached(self, tpl: Template) -> bool:
        artifact = self.load(tpl)
        return artifact is not None and self.handler.is_valid(tpl, artifact)

    # --------------------------- generation --------------------------- #

    @property
    def generating(self) -> bool:
        return self._pending_vars is not None

    def begin_generation(self) -> None:
        self._pending_vars = {}

    def save_nocache_var(self, name: str, value: Any) -> None:
        """Captures a value for replay; last write wins within one generation."""
        if self._pending_vars is None:
            return
        self._pending_vars[name] = copy.deepcopy(value)

    def abort_generation(self) -> None:
        self._pending_vars = None

    def finish_generation(self, tpl: Template, segments: List[Segment]) -> CachedArtifact:
        snapshot = self._pending_vars or {}
        self._pending_vars = None
        self.artifact = self.handler.write(tpl, segments, snapshot)
        return self.artifact


__all__ = ["CachedHandle"]
