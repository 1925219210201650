from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import CompileResult, TagCompiler
from ..attributes import RawArg, variable_name
from ..ops import MakeNocacheOp

if TYPE_CHECKING:
    from ..compiler import TemplateCompiler


class MakeNocacheTag(TagCompiler):
    """
    {make_nocache $var}

    In a caching template, compiles to a runtime call that snapshots the
    current value of the variable into the cached rendering, so nocache
    regions see it on replay. Outside caching the tag compiles to nothing.
    """

    name = "make_nocache"
    required_attributes = ("var",)
    shorttag_order = ("var",)
    option_flags = ()

    def compile(self, compiler: TemplateCompiler, args: List[RawArg]) -> CompileResult:
        attrs = self.get_attributes(compiler, args)
        var = variable_name(attrs["var"])
        if var is None:
            raise compiler.error("{make_nocache} expects a variable name")

        if not compiler.caching:
            return None

        compiler.compiled.has_nocache_code = True
        # the snapshot call itself runs only while the cache is generated
        compiler.suppress_nocache_processing = True
        return MakeNocacheOp(var)


__all__ = ["MakeNocacheTag"]
