from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import CompileResult, TagCompiler
from ..attributes import RawArg
from ..ops import IncludeOp

if TYPE_CHECKING:
    from ..compiler import TemplateCompiler


class IncludeTag(TagCompiler):
    """{include file=...}: renders another template in place."""

    name = "include"
    required_attributes = ("file",)
    shorttag_order = ("file",)

    def compile(self, compiler: TemplateCompiler, args: List[RawArg]) -> CompileResult:
        attrs = self.get_attributes(compiler, args)
        return IncludeOp(attrs["file"])


__all__ = ["IncludeTag"]
