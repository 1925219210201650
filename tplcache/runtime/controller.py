"""
Template runtime controller: fetch / display / is_cached.

Resolves the target template of a call, isolates its variable scope,
opens an output capture level and hands the template to the renderer.
Renders nest freely (includes call back into the controller); every piece
of per-render state is kept as a stack and unwound to the depth recorded
at entry, whatever happens beneath.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Union

from .diagnostics import Diagnostics
from .renderer import TemplateRenderer
from ..errors import MissingParameterError, TypeMismatchError
from ..types import CachingMode, FunctionMode, ObjKind, coerce_caching

if TYPE_CHECKING:
    from ..data import Data
    from ..engine import Engine
    from ..template import Template

logger = logging.getLogger(__name__)

_API_NAMES = {
    FunctionMode.FETCH: "fetch",
    FunctionMode.DISPLAY: "display",
    FunctionMode.IS_CACHED: "is_cached",
}


class TemplateRuntime:
    def __init__(self, engine: Engine, renderer: Optional[TemplateRenderer] = None,
                 diagnostics: Optional[Diagnostics] = None):
        self.engine = engine
        self.renderer = renderer or TemplateRenderer()
        self.diagnostics = diagnostics or Diagnostics()

    def execute(
        self,
        caller: Data,
        template: Union[str, Template, None],
        cache_id: Optional[str],
        compile_id: Optional[str],
        parent: Optional[Data],
        mode: FunctionMode,
    ) -> Any:
        """
        Runs one fetch/display/is_cached call.

        Args:
            caller: Object the API method was called on (engine, template or data object)
            template: Resource name, template object, or None to use the caller itself
            cache_id: Cache partition of a template built from a resource name
            compile_id: Compile partition of a template built from a resource name
            parent: Variable parent of a template built from a resource name
            mode: FETCH, DISPLAY or IS_CACHED

        Returns:
            Rendered content for FETCH, None for DISPLAY, cache verdict for IS_CACHED

        Raises:
            MissingParameterError: No template given and caller is not a template
            TypeMismatchError: A non-template object given as template
        """
        engine = self.engine
        api = _API_NAMES[mode]
        save_vars = True

        if template is None:
            if not caller._is_tpl_obj():
                raise MissingParameterError(f"{api}(): Missing 'template' parameter")
            template = caller
        elif not isinstance(template, str):
            if getattr(template, "kind", None) != ObjKind.TEMPLATE:
                raise TypeMismatchError(f"{api}(): Template object expected, got {type(template).__name__}")
        else:
            save_vars = False
            template = engine.create_template(template, cache_id, compile_id, parent if parent is not None else caller)
            if caller.kind == ObjKind.ENGINE:
                template.caching = caller.caching

        template.caching = coerce_caching(template.caching)

        output = engine.output
        level = output.level
        with self.diagnostics.scoped(engine.error_reporting, engine.mute_undefined_or_null_warnings):
            with output.guard(level):
                self._inherit_context(caller, parent, template)

                if mode == FunctionMode.IS_CACHED:
                    return self._is_cached(template)

                return self._render(template, mode, save_vars)

    # --------------------------- steps --------------------------- #

    @staticmethod
    def _inherit_context(caller: Data, parent: Optional[Data], template: Template) -> None:
        if caller.kind == ObjKind.TEMPLATE and caller is not template:
            template.tpl_functions = dict(caller.tpl_functions)
            template.inheritance = caller.inheritance
        if parent is not None and parent.kind == ObjKind.TEMPLATE and parent.tpl_functions:
            merged = dict(parent.tpl_functions)
            merged.update(template.tpl_functions)
            template.tpl_functions = merged

    def _is_cached(self, template: Template) -> bool:
        if template.caching == CachingMode.OFF:
            return False
        if template.cached is None:
            template.load_cached()
        result = template.cached.is_cached(template)
        tid = template.template_id
        self.engine.is_cached_index[(tid.resource, tid.cache_id, tid.compile_id, int(template.caching))] = template
        return result

    def _render(self, template: Template, mode: FunctionMode, save_vars: bool) -> Optional[str]:
        engine = self.engine
        output = engine.output

        saved = template.scope.snapshot() if save_vars else None
        try:
            output.start()
            template.scope.merge_defaults({
                name: var for name, var in engine.global_vars.items()
                if not template.defines_variable(name)
            })
            self.renderer.render(template, mode)
            template._clean_up()
        finally:
            if saved is not None:
                template.scope.restore(saved)

        if not save_vars and mode == FunctionMode.FETCH:
            engine.memoize_template(template)

        if mode == FunctionMode.FETCH:
            return output.get_clean()
        output.end_flush()
        return None


__all__ = ["TemplateRuntime"]
