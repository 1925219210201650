"""
Engine: root configuration object of the template runtime.

Holds everything shared by the templates it creates: registries, global
variable defaults, output, compiled units, the memo map of one-shot
templates and the index of templates checked with is_cached().
Nothing here is module-global; two engines never see each other's state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TextIO, Tuple

from .cache.base import CacheResource
from .cache.file import FileCacheResource
from .cache.memory import MemoryCacheResource
from .compile import compile_template, create_default_tags
from .compile.compiled import CompiledTemplate
from .config.load import load_config
from .config.model import EngineConfig
from .config.paths import CACHE_DIR
from .data import Data, DataObject
from .registry import Registries
from .resources.base import Source, split_resource_ref
from .resources.file import FileResource
from .resources.string import StringResource
from .runtime.controller import TemplateRuntime
from .runtime.make_nocache import MakeNocacheRuntime
from .runtime.output import OutputStack
from .scope import Variable
from .template import Template
from .template_base import TemplateBase
from .types import CompileCheck, ObjKind, TemplateId

logger = logging.getLogger(__name__)

_RUNTIME_EXTENSIONS: Dict[str, Callable[[], Any]] = {
    "make_nocache": MakeNocacheRuntime,
}

IsCachedKey = Tuple[str, Optional[str], Optional[str], int]
CompiledKey = Tuple[str, Optional[str], bool]


class Engine(TemplateBase):
    kind = ObjKind.ENGINE

    def __init__(self, config: Optional[EngineConfig] = None, *, output: Optional[TextIO] = None):
        super().__init__(parent=None, engine=None)
        self._engine = self
        cfg = config or EngineConfig()
        self.config = cfg

        self.caching = cfg.caching
        self.cache_lifetime = cfg.cache_lifetime
        self.compile_check = cfg.compile_check
        self.caching_type = cfg.caching_type
        self.default_resource_type = cfg.default_resource_type
        self.left_delimiter = cfg.left_delimiter
        self.right_delimiter = cfg.right_delimiter
        self.error_reporting: Optional[int] = cfg.error_reporting
        self.mute_undefined_or_null_warnings = cfg.mute_undefined_or_null_warnings
        self.literals: Dict[str, str] = {}
        self.default_template_handler: Optional[Callable[[str, str], Any]] = None

        self.global_vars: Dict[str, Variable] = {
            name: Variable(value) for name, value in cfg.globals.items()
        }

        self.registries = Registries()
        self.tags = create_default_tags()
        self.output = OutputStack(output)
        self.runtime_controller = TemplateRuntime(self)

        self.template_cache: Dict[TemplateId, Template] = {}
        self.is_cached_index: Dict[IsCachedKey, Template] = {}
        self._compiled: Dict[CompiledKey, CompiledTemplate] = {}
        self._runtimes: Dict[str, Any] = {}

        self._register_builtins(cfg)
        if cfg.literals:
            self.add_literals(cfg.literals)

    @classmethod
    def from_config(cls, config: EngineConfig, **kwargs: Any) -> Engine:
        return cls(config, **kwargs)

    @classmethod
    def from_root(cls, root: Path, **kwargs: Any) -> Engine:
        """Engine configured by <root>/tplcache.yaml (defaults when absent)."""
        return cls(load_config(root), **kwargs)

    def _register_builtins(self, cfg: EngineConfig) -> None:
        resources = self.registries.resources
        resources.register("file", FileResource(cfg.template_dirs or None))
        resources.register("string", StringResource())

        cache_resources = self.registries.cache_resources
        cache_resources.register("memory", MemoryCacheResource())
        if cfg.cache_dir is not None or cfg.caching_type == "file":
            cache_dir = cfg.cache_dir or (Path.cwd() / CACHE_DIR)
            cache_resources.register("file", FileCacheResource(cache_dir))

    # --------------------------- variables --------------------------- #

    def assign_global(self, name: str, value: Any, nocache: bool = False) -> Engine:
        """Sets a process-wide default variable of this engine."""
        self.global_vars[name] = Variable(value, nocache)
        return self

    def create_data(self, parent: Optional[Data] = None, name: Optional[str] = None) -> DataObject:
        """Data-only variable container; its parent defaults to the engine."""
        return DataObject(parent=parent if parent is not None else self, engine=self, name=name)

    # --------------------------- templates --------------------------- #

    def normalize_resource(self, resource: str) -> str:
        kind, name = split_resource_ref(resource, self.default_resource_type)
        return f"{kind}:{name}"

    def create_template(self, resource: str, cache_id: Optional[str] = None,
                        compile_id: Optional[str] = None, parent: Optional[Data] = None) -> Template:
        """
        Builds a template for the given identity.

        A template memoized under the same identity is reused as a clone
        with empty scopes, the engine's current settings and the source
        already resolved by the memoized one; otherwise a new one is created.
        """
        ref = self.normalize_resource(resource)
        memo = self.template_cache.get(TemplateId(ref, cache_id, compile_id))
        if memo is not None:
            logger.debug(f"Reusing memoized template {memo.template_id}")
            return memo.clone_for_reuse(parent if parent is not None else self)
        return Template(self, ref, cache_id, compile_id, parent if parent is not None else self)

    def memoize_template(self, tpl: Template) -> None:
        """
        Stores a one-shot template for reuse under its identity.

        The parent link is detached and both scopes are cleared first.
        An already memoized identity is left untouched.
        """
        tid = tpl.template_id
        if tid in self.template_cache:
            return
        tpl.parent = None
        tpl.scope.clear()
        self.template_cache[tid] = tpl
        logger.debug(f"Memoized template {tid}")

    def clear_template_cache(self) -> None:
        self.template_cache.clear()
        self.is_cached_index.clear()

    def load_source(self, resource: str) -> Source:
        kind, name = split_resource_ref(resource, self.default_resource_type)
        handler = self.registries.resources.lookup(kind)
        return handler.load(name, self)

    def source_timestamp(self, resource: str) -> Optional[float]:
        kind, name = split_resource_ref(resource, self.default_resource_type)
        return self.registries.resources.lookup(kind).timestamp(name, self)

    def get_compiled(self, tpl: Template) -> CompiledTemplate:
        """
        Compiled unit of a template, shared by templates with the same
        resource, compile id and caching flag.

        With compile check enabled a changed source timestamp forces recompilation.
        """
        key: CompiledKey = (tpl.resource, tpl.compile_id, bool(tpl.caching))
        compiled = self._compiled.get(key)
        if compiled is not None:
            if tpl.compile_check == CompileCheck.OFF:
                return compiled
            if compiled.source_timestamp == tpl.source.timestamp:
                return compiled
            logger.debug(f"Source of '{tpl.resource}' changed, recompiling")
        compiled = compile_template(tpl)
        self._compiled[key] = compiled
        return compiled

    def clear_compiled_templates(self) -> None:
        self._compiled.clear()

    # --------------------------- cache --------------------------- #

    def get_cache_resource(self) -> CacheResource:
        return self.registries.cache_resources.lookup(self.caching_type)

    def clear_cache(self, resource: str, cache_id: Optional[str] = None, compile_id: Optional[str] = None) -> int:
        """Deletes cached renderings of a template (None parts match anything)."""
        return self.get_cache_resource().delete(self.normalize_resource(resource), cache_id, compile_id)

    def clear_all_cache(self) -> int:
        return self.get_cache_resource().delete()

    # --------------------------- runtime extensions --------------------------- #

    def get_runtime(self, name: str) -> Any:
        ext = self._runtimes.get(name)
        if ext is None:
            factory = _RUNTIME_EXTENSIONS.get(name)
            if factory is None:
                raise KeyError(f"Unknown runtime extension '{name}'")
            ext = self._runtimes[name] = factory()
        return ext

    def __repr__(self) -> str:
        return f"Engine(caching={self.caching.name}, caching_type={self.caching_type!r})"


__all__ = ["Engine"]
