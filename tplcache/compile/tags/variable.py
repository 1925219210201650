from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .base import CompileResult, TagCompiler
from ..ops import ObjectOutputOp, VarOutputOp

if TYPE_CHECKING:
    from ..compiler import TemplateCompiler

_VAR_TAG_RE = re.compile(r"^\$(?P<name>[A-Za-z_]\w*)(?:->(?P<member>[A-Za-z_]\w*))?(?P<flags>(?:\s+\w+)*)$")


class VariableTag(TagCompiler):
    """
    {$name}, {$name nocache}, {$object->member}

    Variables assigned with nocache=True are compiled as nocache output.
    """

    name = "$"

    def compile_expression(self, compiler: TemplateCompiler, body: str) -> CompileResult:
        m = _VAR_TAG_RE.match(body)
        if not m:
            raise compiler.error(f"invalid variable tag '{{{body}}}'")
        flags = m.group("flags").split()
        for flag in flags:
            if flag not in self.option_flags:
                raise compiler.error(f"unexpected flag '{flag}' in variable tag")
        if "nocache" in flags:
            compiler.tag_nocache = True

        name, member = m.group("name"), m.group("member")
        if member is not None:
            return ObjectOutputOp(name, member)

        var = compiler.template.get_variable(name) if compiler.template is not None else None
        if var is not None and var.nocache:
            compiler.tag_nocache = True
        return VarOutputOp(name)


__all__ = ["VariableTag"]
