"""
Built-in tag compilers and their registry.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .assign import AssignTag
from .base import CompileResult, TagCompiler
from .function import CallTag, FunctionTag
from .include import IncludeTag
from .make_nocache import MakeNocacheTag
from .nocache import NocacheBlockTag
from .variable import VariableTag

logger = logging.getLogger(__name__)


class TagRegistry:
    """Tag name -> compiler."""

    def __init__(self):
        self._tags: Dict[str, TagCompiler] = {}

    def register(self, tag: TagCompiler) -> None:
        if tag.name in self._tags:
            logger.warning(f"Tag '{tag.name}' overwrites existing tag compiler")
        self._tags[tag.name] = tag

    def get(self, name: str) -> Optional[TagCompiler]:
        return self._tags.get(name)

    def names(self) -> List[str]:
        return sorted(self._tags)


def create_default_tags() -> TagRegistry:
    registry = TagRegistry()
    for tag in (
        AssignTag(),
        CallTag(),
        FunctionTag(),
        IncludeTag(),
        MakeNocacheTag(),
        NocacheBlockTag(),
    ):
        registry.register(tag)
    return registry


__all__ = [
    "TagRegistry",
    "TagCompiler",
    "CompileResult",
    "VariableTag",
    "MakeNocacheTag",
    "create_default_tags",
]
