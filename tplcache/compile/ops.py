"""
Compiled code of a template.

A compiled unit is a list of operations. Each operation runs against a
render context (see tplcache.runtime.renderer.RenderContext), which owns
the output writer and gives access to variables, registries and the
runtime extensions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from ..runtime.renderer import RenderContext


# --------------------------- values --------------------------- #

@dataclass(frozen=True)
class Value:
    def evaluate(self, ctx: RenderContext) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class Literal(Value):
    value: Any

    def evaluate(self, ctx: RenderContext) -> Any:
        return self.value


@dataclass(frozen=True)
class VarRef(Value):
    name: str

    def evaluate(self, ctx: RenderContext) -> Any:
        return ctx.get_value(self.name)


# --------------------------- operations --------------------------- #

@dataclass(frozen=True)
class Op:
    def run(self, ctx: RenderContext) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class TextOp(Op):
    text: str

    def run(self, ctx: RenderContext) -> None:
        ctx.write(self.text)


@dataclass(frozen=True)
class VarOutputOp(Op):
    name: str

    def run(self, ctx: RenderContext) -> None:
        ctx.write_variable(ctx.get_value(self.name))


@dataclass(frozen=True)
class ObjectOutputOp(Op):
    object_name: str
    member: str

    def run(self, ctx: RenderContext) -> None:
        value = ctx.engine.registries.objects.access(self.object_name, self.member)
        ctx.write_variable(value)


@dataclass(frozen=True)
class AssignOp(Op):
    name: str
    value: Value
    nocache: bool = False

    def run(self, ctx: RenderContext) -> None:
        ctx.tpl.assign(self.name, self.value.evaluate(ctx), nocache=self.nocache)


@dataclass(frozen=True)
class IncludeOp(Op):
    file: Value

    def run(self, ctx: RenderContext) -> None:
        ctx.include(str(self.file.evaluate(ctx)))


@dataclass(frozen=True)
class CallOp(Op):
    name: Value

    def run(self, ctx: RenderContext) -> None:
        ctx.call_function(str(self.name.evaluate(ctx)))


@dataclass(frozen=True)
class MakeNocacheOp(Op):
    """Snapshots a variable for nocache regions replayed from cache."""
    name: str

    def run(self, ctx: RenderContext) -> None:
        ctx.engine.get_runtime("make_nocache").save(ctx.tpl, self.name)


@dataclass(frozen=True)
class NocacheOp(Op):
    """Region re-executed on every replay of a cached rendering."""
    region_id: int
    body: List[Op] = field(default_factory=list)

    def run(self, ctx: RenderContext) -> None:
        ctx.run_nocache_region(self)


@dataclass(frozen=True)
class TemplateFunction:
    name: str
    body: List[Op] = field(default_factory=list)
    resource: Optional[str] = None


__all__ = [
    "Value",
    "Literal",
    "VarRef",
    "Op",
    "TextOp",
    "VarOutputOp",
    "ObjectOutputOp",
    "AssignOp",
    "IncludeOp",
    "CallOp",
    "MakeNocacheOp",
    "NocacheOp",
    "TemplateFunction",
]
