"""
Template compilation: source -> CompiledTemplate.

Pre filters run on the source text before compilation, post filters on
the compiled unit afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .compiled import CompiledTemplate
from .compiler import TemplateCompiler
from .lexer import Lexer
from .tags import TagRegistry, create_default_tags
from ..types import CachingMode

if TYPE_CHECKING:
    from ..template import Template

logger = logging.getLogger(__name__)


def compile_template(tpl: Template) -> CompiledTemplate:
    """
    Compiles the source of a template with the engine's tags, delimiters,
    literals and filters.
    """
    engine = tpl.engine
    source = tpl.source
    filters = engine.registries.filters

    text = filters.apply("pre", source.content, tpl)
    compiler = TemplateCompiler(
        engine.tags,
        Lexer(engine.left_delimiter, engine.right_delimiter, engine.get_literals()),
        template=tpl,
        caching=tpl.caching != CachingMode.OFF,
        name=source.resource,
    )
    compiled = compiler.compile(text, source.timestamp)
    compiled = filters.apply("post", compiled, tpl)
    if not isinstance(compiled, CompiledTemplate):
        raise TypeError(f"post filter must return a CompiledTemplate, got {type(compiled).__name__}")
    return compiled


__all__ = [
    "CompiledTemplate",
    "TemplateCompiler",
    "Lexer",
    "TagRegistry",
    "create_default_tags",
    "compile_template",
]
