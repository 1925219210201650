from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from .base import CompileResult, TagCompiler
from ..ops import Op, Value

if TYPE_CHECKING:
    from ..compiler import TemplateCompiler


class NocacheBlockTag(TagCompiler):
    """{nocache}...{/nocache}: the body is re-executed on every cache replay."""

    name = "nocache"
    option_flags = ()
    is_block = True

    def open(self, compiler: TemplateCompiler, args) -> Dict[str, Value]:
        attrs = self.get_attributes(compiler, args)
        compiler.nocache_depth += 1
        return attrs

    def compile_close(self, compiler: TemplateCompiler, body: List[Op], attrs: Dict[str, Value]) -> CompileResult:
        compiler.nocache_depth -= 1
        if not compiler.caching or compiler.nocache_depth > 0:
            # no caching, or already inside an enclosing region
            return body
        return compiler.compiled.add_region(body)


__all__ = ["NocacheBlockTag"]
