"""
Template compiler.

Turns template source into a CompiledTemplate. Tags are dispatched to
registered tag compilers; the compiler keeps the bookkeeping shared by
all tags: the unit under construction, the block stack and the nocache
flags of the tag currently being compiled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from .attributes import split_args
from .compiled import CompiledTemplate
from .lexer import Lexer, TokenKind
from .ops import NocacheOp, Op, TextOp, Value
from .tags import TagCompiler, TagRegistry, VariableTag
from ..errors import CompilerError

if TYPE_CHECKING:
    from ..template import Template

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    tag: Optional[TagCompiler]
    attrs: Dict[str, Value] = field(default_factory=dict)
    ops: List[Op] = field(default_factory=list)
    line: int = 0


class TemplateCompiler:
    """
    Compiles one template source.

    Attributes available to tag compilers:
        template: Template being compiled (variables are inspected for nocache flags)
        caching: Whether the unit is compiled for a caching template
        compiled: Unit under construction
        tag_nocache: Output of the current tag must become a nocache region
        suppress_nocache_processing: Current tag opts out of nocache wrapping
        nocache_depth: Nesting depth of {nocache} blocks
    """

    def __init__(
        self,
        tags: TagRegistry,
        lexer: Lexer,
        *,
        template: Optional[Template] = None,
        caching: bool = False,
        name: str = "",
    ):
        self.tags = tags
        self.lexer = lexer
        self.template = template
        self.caching = caching
        self.name = name
        self.compiled = CompiledTemplate(resource=name, caching=caching)
        self.tag_nocache = False
        self.suppress_nocache_processing = False
        self.nocache_depth = 0
        self._variable_tag = VariableTag()
        self._frames: List[_Frame] = []
        self._line = 0

    def error(self, message: str) -> CompilerError:
        return CompilerError(message, self.name, self._line)

    def compile(self, source: str, source_timestamp: float = 0.0) -> CompiledTemplate:
        self.compiled = CompiledTemplate(resource=self.name, caching=self.caching, source_timestamp=source_timestamp)
        self._frames = [_Frame(tag=None)]
        self.nocache_depth = 0

        for token in self.lexer.tokenize(source, self.name):
            self._line = token.line
            if token.kind == TokenKind.TEXT:
                self._frames[-1].ops.append(TextOp(token.value))
            else:
                self._compile_tag(token.value)

        if len(self._frames) > 1:
            open_frame = self._frames[-1]
            self._line = open_frame.line
            raise self.error(f"unclosed {{{open_frame.tag.name}}} tag")

        self.compiled.ops = self._frames[0].ops
        logger.debug(
            f"Compiled '{self.name}' -> {len(self.compiled.ops)} ops, "
            f"{len(self.compiled.nocache_regions)} nocache regions"
        )
        return self.compiled

    # --------------------------- tags --------------------------- #

    def _compile_tag(self, body: str) -> None:
        self.tag_nocache = False
        self.suppress_nocache_processing = False

        if not body:
            raise self.error("empty tag")

        if body.startswith("/"):
            self._close_block(body[1:].strip())
            return

        if body.startswith("$"):
            self._emit(self._variable_tag.compile_expression(self, body))
            return

        parts = body.split(None, 1)
        name = parts[0]
        tag = self.tags.get(name)
        if tag is None:
            raise self.error(f"unknown tag '{name}'")
        try:
            args = split_args(parts[1] if len(parts) > 1 else "")
        except ValueError as e:
            raise self.error(f"bad attributes in {{{name}}}: {e}") from None

        if tag.is_block:
            attrs = tag.open(self, args)
            self._frames.append(_Frame(tag=tag, attrs=attrs, line=self._line))
            return

        self._emit(tag.compile(self, args))

    def _close_block(self, name: str) -> None:
        frame = self._frames[-1]
        if frame.tag is None or frame.tag.name != name:
            raise self.error(f"unexpected closing tag {{/{name}}}")
        self._frames.pop()
        self._emit(frame.tag.compile_close(self, frame.ops, frame.attrs))

    def _emit(self, result) -> None:
        if result is None:
            return
        ops = result if isinstance(result, list) else [result]
        if not ops:
            return
        if (
            self.caching
            and self.tag_nocache
            and not self.suppress_nocache_processing
            and self.nocache_depth == 0
            and not all(isinstance(op, NocacheOp) for op in ops)
        ):
            ops = [self.compiled.add_region(ops)]
        self._frames[-1].ops.extend(ops)


__all__ = ["TemplateCompiler"]
