"""
Base class of tag compilers.

A tag compiler declares its attributes (required, optional, shorthand
order, option flags) and turns parsed attributes into compiled operations.
Block tags additionally compile their closing tag.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Sequence, Union

from ..attributes import RawArg, parse_value
from ..ops import Literal, Op, Value

if TYPE_CHECKING:
    from ..compiler import TemplateCompiler

CompileResult = Union[Op, List[Op], None]


class TagCompiler:
    name: str = ""

    #: Attributes that must be present
    required_attributes: Sequence[str] = ()
    #: Attributes that may be present
    optional_attributes: Sequence[str] = ()
    #: Attribute names assigned to positional (shorthand) values, in order
    shorttag_order: Sequence[str] = ()
    #: Bare-word flags accepted by the tag
    option_flags: Sequence[str] = ("nocache",)
    #: Whether the tag opens a block closed by {/name}
    is_block: bool = False

    def get_attributes(self, compiler: TemplateCompiler, args: List[RawArg]) -> Dict[str, Value]:
        """
        Maps parsed arguments to attribute values and validates them.

        Option flags are returned as Literal(True). The `nocache` flag also
        marks the tag output as nocache code.

        Raises:
            CompilerError: Unknown, duplicate or missing attributes
        """
        attrs: Dict[str, Value] = {}
        positional = 0
        for arg in args:
            if arg.key is None and arg.text in self.option_flags:
                attrs[arg.text] = Literal(True)
                continue
            if arg.key is None:
                if positional >= len(self.shorttag_order):
                    raise compiler.error(f"too many shorthand attributes for {{{self.name}}}")
                key = self.shorttag_order[positional]
                positional += 1
            else:
                key = arg.key
            allowed = set(self.required_attributes) | set(self.optional_attributes) | set(self.shorttag_order)
            if key not in allowed:
                raise compiler.error(f"unexpected attribute '{key}' in {{{self.name}}}")
            if key in attrs:
                raise compiler.error(f"duplicate attribute '{key}' in {{{self.name}}}")
            attrs[key] = parse_value(arg.text)

        for key in self.required_attributes:
            if key not in attrs:
                raise compiler.error(f"missing '{key}' attribute in {{{self.name}}}")

        flag = attrs.get("nocache")
        if isinstance(flag, Literal) and flag.value is True:
            compiler.tag_nocache = True
        return attrs

    def compile(self, compiler: TemplateCompiler, args: List[RawArg]) -> CompileResult:
        raise NotImplementedError

    def open(self, compiler: TemplateCompiler, args: List[RawArg]) -> Dict[str, Value]:
        """Opening tag of a block: validates attributes, the body follows."""
        return self.get_attributes(compiler, args)

    def compile_close(self, compiler: TemplateCompiler, body: List[Op], attrs: Dict[str, Value]) -> CompileResult:
        raise NotImplementedError


__all__ = ["TagCompiler", "CompileResult"]
