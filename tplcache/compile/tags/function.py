from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from .base import CompileResult, TagCompiler
from ..attributes import RawArg, variable_name
from ..ops import CallOp, Literal, Op, TemplateFunction, Value

if TYPE_CHECKING:
    from ..compiler import TemplateCompiler


class FunctionTag(TagCompiler):
    """{function name=fn}...{/function}: adds fn to the template's function table."""

    name = "function"
    required_attributes = ("name",)
    shorttag_order = ("name",)
    option_flags = ()
    is_block = True

    def open(self, compiler: TemplateCompiler, args: List[RawArg]) -> Dict[str, Value]:
        attrs = self.get_attributes(compiler, args)
        if variable_name(attrs["name"]) is None or not isinstance(attrs["name"], Literal):
            raise compiler.error("{function} name must be a literal identifier")
        return attrs

    def compile_close(self, compiler: TemplateCompiler, body: List[Op], attrs: Dict[str, Value]) -> CompileResult:
        name = str(attrs["name"].value)
        if name in compiler.compiled.functions:
            raise compiler.error(f"function '{name}' is already defined")
        compiler.compiled.functions[name] = TemplateFunction(name, body, resource=compiler.compiled.resource)
        return None


class CallTag(TagCompiler):
    """{call name=fn}"""

    name = "call"
    required_attributes = ("name",)
    shorttag_order = ("name",)

    def compile(self, compiler: TemplateCompiler, args: List[RawArg]) -> CompileResult:
        attrs = self.get_attributes(compiler, args)
        return CallOp(attrs["name"])


__all__ = ["FunctionTag", "CallTag"]
