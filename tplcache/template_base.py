"""
Methods shared by the engine and templates.

Rendering entry points (fetch / display / is_cached) go through the
engine's runtime controller. Registration methods write to the engine's
registries, which are shared by every template of that engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Union

from .compile.ops import TemplateFunction
from .data import Data
from .errors import FilterNotCallableError, LiteralConflictError
from .registry.filters import FilterFunc
from .types import (
    CachingMode,
    CompileCheck,
    FunctionMode,
    coerce_caching,
    coerce_compile_check,
)

if TYPE_CHECKING:
    from .cache.base import CacheResource
    from .resources.base import Resource
    from .template import Template

TemplateArg = Union[str, "Template", None]


class TemplateBase(Data):
    def __init__(self, parent: Optional[Data] = None, engine=None, name: Optional[str] = None):
        super().__init__(parent=parent, engine=engine, name=name)
        self.cache_id: Optional[str] = None
        self.compile_id: Optional[str] = None
        self.caching: CachingMode = CachingMode.OFF
        self.compile_check: CompileCheck = CompileCheck.ON
        self.cache_lifetime: int = 3600
        self.tpl_functions: Dict[str, TemplateFunction] = {}
        self.inheritance: Any = None

    # --------------------------- rendering --------------------------- #

    def fetch(self, template: TemplateArg = None, cache_id: Optional[str] = None,
              compile_id: Optional[str] = None, parent: Optional[Data] = None) -> str:
        """
        Renders a template and returns the output.

        Args:
            template: Resource name ('file:page.tpl', 'string:...') or template object;
                      None renders the object this method is called on
            cache_id: Cache partition
            compile_id: Compile partition
            parent: Next higher level of variables

        Returns:
            Rendered output
        """
        return self._get_engine().runtime_controller.execute(
            self, template, cache_id, compile_id, parent, FunctionMode.FETCH
        )

    def display(self, template: TemplateArg = None, cache_id: Optional[str] = None,
                compile_id: Optional[str] = None, parent: Optional[Data] = None) -> None:
        """Renders a template into the active output (the enclosing capture or the engine sink)."""
        self._get_engine().runtime_controller.execute(
            self, template, cache_id, compile_id, parent, FunctionMode.DISPLAY
        )

    def is_cached(self, template: TemplateArg = None, cache_id: Optional[str] = None,
                  compile_id: Optional[str] = None, parent: Optional[Data] = None) -> bool:
        """Tells whether a valid cached rendering exists (always False when caching is off)."""
        return self._get_engine().runtime_controller.execute(
            self, template, cache_id, compile_id, parent, FunctionMode.IS_CACHED
        )

    # --------------------------- settings --------------------------- #

    def set_caching(self, caching: Union[CachingMode, int, str]):
        self.caching = coerce_caching(caching)
        return self

    def set_compile_check(self, compile_check: Union[CompileCheck, int, str]):
        self.compile_check = coerce_compile_check(compile_check)
        return self

    def set_cache_lifetime(self, cache_lifetime: int):
        self.cache_lifetime = int(cache_lifetime)
        return self

    def set_cache_id(self, cache_id: Optional[str]):
        self.cache_id = cache_id
        return self

    def set_compile_id(self, compile_id: Optional[str]):
        self.compile_id = compile_id
        return self

    # --------------------------- filters --------------------------- #

    def register_filter(self, filter_type: str, callback: FilterFunc, name: Optional[str] = None):
        self._get_engine().registries.filters.register(filter_type, callback, name)
        return self

    def unregister_filter(self, filter_type: str, callback_or_name: Union[str, FilterFunc]):
        self._get_engine().registries.filters.unregister(filter_type, callback_or_name)
        return self

    def load_filter(self, filter_type: str, spec: str):
        """Imports 'package.module:callable' and registers it as a filter of the given type."""
        self._get_engine().registries.filters.load(filter_type, spec)
        return self

    def unload_filter(self, filter_type: str, spec: str):
        self._get_engine().registries.filters.unload(filter_type, spec)
        return self

    # --------------------------- objects and classes --------------------------- #

    def register_object(self, object_name: str, obj: Any, allowed_methods_properties: Iterable[str] = (),
                        format: bool = True, block_methods: Iterable[str] = ()):
        """
        Registers an object for use in templates.

        Args:
            object_name: Name used in templates ({$name->member})
            obj: The object
            allowed_methods_properties: Reachable members (empty = all)
            format: Argument format flag, kept for plugins
            block_methods: Members usable as block methods

        Raises:
            ConstraintViolationError: A listed member does not exist (or a block
                method is not callable); nothing is registered
        """
        self._get_engine().registries.objects.register(
            object_name, obj,
            allowed=allowed_methods_properties,
            format=format,
            block_methods=block_methods,
        )
        return self

    def unregister_object(self, object_name: str):
        self._get_engine().registries.objects.unregister(object_name)
        return self

    def get_registered_object(self, object_name: str) -> Any:
        return self._get_engine().registries.objects.lookup(object_name)

    def register_class(self, class_name: str, class_impl: type):
        self._get_engine().registries.classes.register(class_name, class_impl)
        return self

    def unregister_class(self, class_name: str):
        self._get_engine().registries.classes.unregister(class_name)
        return self

    # --------------------------- resources --------------------------- #

    def register_resource(self, name: str, handler: Resource):
        self._get_engine().registries.resources.register(name, handler)
        return self

    def unregister_resource(self, name: str):
        self._get_engine().registries.resources.unregister(name)
        return self

    def register_cache_resource(self, name: str, handler: CacheResource):
        self._get_engine().registries.cache_resources.register(name, handler)
        return self

    def unregister_cache_resource(self, name: str):
        self._get_engine().registries.cache_resources.unregister(name)
        return self

    def register_default_template_handler(self, callback: Callable[[str, str], Any]):
        if not callable(callback):
            raise FilterNotCallableError("Default template handler not callable")
        self._get_engine().default_template_handler = callback
        return self

    # --------------------------- literals --------------------------- #

    def get_literals(self) -> List[str]:
        return list(self._get_engine().literals)

    def add_literals(self, literals: Union[str, Iterable[str], None] = None):
        if literals is not None:
            self._set_literals([literals] if isinstance(literals, str) else list(literals))
        return self

    def set_literals(self, literals: Union[str, Iterable[str], None] = None):
        engine = self._get_engine()
        engine.literals = {}
        engine.clear_compiled_templates()
        if literals:
            self._set_literals([literals] if isinstance(literals, str) else list(literals))
        return self

    def _set_literals(self, literals: List[str]) -> None:
        engine = self._get_engine()
        conflicts = [lit for lit in (engine.left_delimiter, engine.right_delimiter) if lit in literals]
        if conflicts:
            raise LiteralConflictError(conflicts)
        for lit in literals:
            engine.literals[lit] = lit
        engine.clear_compiled_templates()


__all__ = ["TemplateBase"]
