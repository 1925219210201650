from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .cache.handle import CachedHandle
from .compile.compiled import CompiledTemplate
from .data import Data
from .resources.base import Source
from .template_base import TemplateBase
from .types import CompileCheck, ObjKind, TemplateId

if TYPE_CHECKING:
    from .engine import Engine

logger = logging.getLogger(__name__)


class Template(TemplateBase):
    """
    One renderable template: resolved identity, source, compiled unit,
    cached rendering handle and its own variable scope.

    Created by Engine.create_template(); settings default to the engine's.
    """

    kind = ObjKind.TEMPLATE

    def __init__(self, engine: Engine, resource: str, cache_id: Optional[str] = None,
                 compile_id: Optional[str] = None, parent: Optional[Data] = None):
        super().__init__(parent=parent, engine=engine)
        self.resource = resource
        self.cache_id = cache_id
        self.compile_id = compile_id
        self.caching = engine.caching
        self.cache_lifetime = engine.cache_lifetime
        self.compile_check = engine.compile_check
        self.cached: Optional[CachedHandle] = None
        self._source: Optional[Source] = None
        self._compiled: Optional[CompiledTemplate] = None

    @property
    def engine(self) -> Engine:
        return self._get_engine()

    @property
    def template_id(self) -> TemplateId:
        return TemplateId(self.resource, self.cache_id, self.compile_id)

    @property
    def source(self) -> Source:
        """
        Resolved template source, loaded on first access.

        With compile check enabled a source resolved earlier is reloaded
        when the resource reports a different timestamp.
        """
        src = self._source
        if src is not None and self.compile_check != CompileCheck.OFF:
            if self.engine.source_timestamp(self.resource) != src.timestamp:
                logger.debug(f"Source of '{self.resource}' changed, reloading")
                src = None
        if src is None:
            src = self._source = self.engine.load_source(self.resource)
        return src

    @property
    def compiled(self) -> CompiledTemplate:
        if self._compiled is None:
            self._compiled = self.engine.get_compiled(self)
        return self._compiled

    def load_cached(self) -> CachedHandle:
        """Resolves the cached-rendering handle through the engine's caching type."""
        self.cached = CachedHandle(self.engine.get_cache_resource())
        return self.cached

    def _clean_up(self) -> None:
        """Releases per-render state; the resolved source is kept."""
        if self.cached is not None:
            self.cached.abort_generation()
        self._compiled = None

    def clone_for_reuse(self, parent: Optional[Data]) -> Template:
        """
        Fresh template with the same identity and resolved source.

        Settings come from the engine as for any new template. Variables,
        config variables and the cached handle are never carried over.
        """
        clone = Template(self.engine, self.resource, self.cache_id, self.compile_id, parent)
        clone._source = self._source
        return clone

    def __repr__(self) -> str:
        return f"Template({self.template_id})"


__all__ = ["Template"]
