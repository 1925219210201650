"""
Execution of compiled templates.

The renderer decides, for a caching template, whether to replay the
cached rendering or to generate it anew:

  replay:   seed the scope with the nocache snapshot, write the literal
             segments, re-execute every nocache region in place and repeat
             dynamic includes
  generate: execute the whole unit, split the output into literal text
             and markers for nocache regions and dynamic includes, write the
             artifact with the snapshot collected by {make_nocache}

Non-caching templates simply execute their operations.
"""

from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING, Any, List, Optional

from .diagnostics import RENDER_LOGGER, UndefinedVariableWarning
from .output import OutputStack
from ..cache.model import SEGMENT_INCLUDE, SEGMENT_NOCACHE, SEGMENT_TEXT, CachedArtifact, Segment
from ..compile.compiled import CompiledTemplate
from ..compile.ops import NocacheOp, Op
from ..errors import NotFoundError
from ..scope import Variable
from ..types import CachingMode, FunctionMode

if TYPE_CHECKING:
    from ..engine import Engine
    from ..template import Template

logger = logging.getLogger(__name__)
render_logger = logging.getLogger(RENDER_LOGGER)


# --------------------------- writers --------------------------- #

class PlainWriter:
    def __init__(self, output: OutputStack):
        self.output = output

    def write(self, text: str) -> None:
        self.output.write(text)

    def begin_nocache(self, region_id: int) -> None:
        pass

    def end_nocache(self) -> None:
        pass

    def include(self, resource: str, content: str) -> None:
        self.write(content)


class SegmentWriter(PlainWriter):
    """
    Writes through to the output and records cache segments.

    Text written outside nocache regions becomes literal segments; each
    top-level nocache region becomes a marker, and so does each top-level
    include whose rendering ran nocache code.
    """

    def __init__(self, output: OutputStack):
        super().__init__(output)
        self._segments: List[Segment] = []
        self._literal: List[str] = []
        self._depth = 0

    def write(self, text: str) -> None:
        self.output.write(text)
        if self._depth == 0 and text:
            self._literal.append(text)

    def _flush_literal(self) -> None:
        if self._literal:
            self._segments.append((SEGMENT_TEXT, "".join(self._literal)))
            self._literal = []

    def begin_nocache(self, region_id: int) -> None:
        if self._depth == 0:
            self._flush_literal()
            self._segments.append((SEGMENT_NOCACHE, region_id))
        self._depth += 1

    def end_nocache(self) -> None:
        self._depth -= 1

    def include(self, resource: str, content: str) -> None:
        if self._depth > 0:
            self.write(content)
            return
        self._flush_literal()
        self._segments.append((SEGMENT_INCLUDE, resource))
        self.output.write(content)

    def segments(self) -> List[Segment]:
        self._flush_literal()
        return list(self._segments)


# --------------------------- context --------------------------- #

class RenderContext:
    """State handed to compiled operations while one template executes."""

    def __init__(self, tpl: Template, compiled: CompiledTemplate, writer: PlainWriter,
                 renderer: TemplateRenderer):
        self.tpl = tpl
        self.compiled = compiled
        self.writer = writer
        self.renderer = renderer

    @property
    def engine(self) -> Engine:
        return self.tpl.engine

    def write(self, text: str) -> None:
        self.writer.write(text)

    def get_value(self, name: str) -> Any:
        var: Optional[Variable] = self.tpl.get_variable(name)
        if var is None:
            render_logger.info(f"Undefined variable '${name}' in {self.tpl.template_id.resource}")
            warnings.warn(f"Undefined variable '${name}'", UndefinedVariableWarning, stacklevel=2)
            return None
        return var.value

    def write_variable(self, value: Any) -> None:
        text = "" if value is None else str(value)
        text = self.engine.registries.filters.apply("variable", text, self.tpl)
        self.write(text)

    def run(self, ops: List[Op]) -> None:
        for op in ops:
            op.run(self)

    def include(self, resource: str) -> None:
        """
        Renders a sub-template in place.

        When the sub-template ran nocache code (its own regions or those of
        templates it includes), the include is recorded as a dynamic segment
        and repeated on replay instead of being frozen into the cache.
        """
        runs = self.renderer.nocache_runs
        content = self.engine.runtime_controller.execute(
            self.tpl,
            resource,
            self.tpl.cache_id,
            self.tpl.compile_id,
            self.tpl,
            FunctionMode.FETCH,
        )
        if self.renderer.nocache_runs != runs:
            self.writer.include(resource, content or "")
        else:
            self.write(content or "")

    def call_function(self, name: str) -> None:
        func = self.tpl.tpl_functions.get(name)
        if func is None:
            raise NotFoundError(f"Unable to find template function '{name}'")
        self.run(func.body)

    def run_nocache_region(self, region: NocacheOp) -> None:
        self.renderer.nocache_runs += 1
        own = self.compiled.nocache_regions.get(region.region_id) is region
        if own:
            self.writer.begin_nocache(region.region_id)
        try:
            self.run(region.body)
        finally:
            if own:
                self.writer.end_nocache()


# --------------------------- renderer --------------------------- #

class TemplateRenderer:
    """Compiled-render executor: render(tpl, mode) writes into the engine output."""

    def __init__(self):
        # nocache regions executed so far, across nested renders
        self.nocache_runs = 0

    def render(self, tpl: Template, mode: FunctionMode) -> None:
        engine = tpl.engine
        output = engine.output
        compiled = tpl.compiled
        tpl.tpl_functions.update(compiled.functions)

        output.start()
        if tpl.caching != CachingMode.OFF:
            self._render_caching(tpl, compiled)
        else:
            RenderContext(tpl, compiled, PlainWriter(output), self).run(compiled.ops)
        content = output.get_clean()
        output.write(engine.registries.filters.apply("output", content, tpl))

    def _render_caching(self, tpl: Template, compiled: CompiledTemplate) -> None:
        handle = tpl.cached if tpl.cached is not None else tpl.load_cached()
        artifact = handle.load(tpl)
        if artifact is not None and handle.handler.is_valid(tpl, artifact) and self._replayable(artifact, compiled):
            logger.debug(f"Cache hit for {tpl.template_id}")
            self._replay(tpl, compiled, artifact)
            return

        logger.debug(f"Cache miss for {tpl.template_id}, generating")
        writer = SegmentWriter(tpl.engine.output)
        handle.begin_generation()
        try:
            RenderContext(tpl, compiled, writer, self).run(compiled.ops)
        except BaseException:
            handle.abort_generation()
            raise
        handle.finish_generation(tpl, writer.segments())

    @staticmethod
    def _replayable(artifact: CachedArtifact, compiled: CompiledTemplate) -> bool:
        """Every nocache marker must point at a region of the current compiled unit."""
        for kind, value in artifact.segments:
            if kind == SEGMENT_NOCACHE and int(value) not in compiled.nocache_regions:
                return False
        return True

    def _replay(self, tpl: Template, compiled: CompiledTemplate, artifact: CachedArtifact) -> None:
        tpl.engine.get_runtime("make_nocache").store(tpl, artifact.nocache_vars)
        writer = PlainWriter(tpl.engine.output)
        ctx = RenderContext(tpl, compiled, writer, self)
        for kind, value in artifact.segments:
            if kind == SEGMENT_TEXT:
                writer.write(value)
            elif kind == SEGMENT_INCLUDE:
                ctx.include(value)
            else:
                ctx.run_nocache_region(compiled.nocache_regions[int(value)])


__all__ = ["TemplateRenderer", "RenderContext", "PlainWriter", "SegmentWriter"]
