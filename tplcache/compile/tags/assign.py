from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import CompileResult, TagCompiler
from ..attributes import RawArg, variable_name
from ..ops import AssignOp

if TYPE_CHECKING:
    from ..compiler import TemplateCompiler


class AssignTag(TagCompiler):
    """{assign var=name value=...} / {assign name ...}"""

    name = "assign"
    required_attributes = ("var", "value")
    shorttag_order = ("var", "value")

    def compile(self, compiler: TemplateCompiler, args: List[RawArg]) -> CompileResult:
        attrs = self.get_attributes(compiler, args)
        var = variable_name(attrs["var"])
        if var is None:
            raise compiler.error("{assign} expects a variable name in 'var'")
        return AssignOp(var, attrs["value"], nocache=compiler.tag_nocache)


__all__ = ["AssignTag"]
