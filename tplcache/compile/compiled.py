from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from .ops import NocacheOp, Op, TemplateFunction


@dataclass
class CompiledTemplate:
    """
    Executable unit produced by the compiler.

    `nocache_regions` indexes every nocache region (including those inside
    template functions) by id, so a cached rendering can refer to them.
    """
    resource: str
    ops: List[Op] = field(default_factory=list)
    functions: Dict[str, TemplateFunction] = field(default_factory=dict)
    nocache_regions: Dict[int, NocacheOp] = field(default_factory=dict)
    has_nocache_code: bool = False
    caching: bool = False
    source_timestamp: float = 0.0
    timestamp: float = field(default_factory=time.time)

    def add_region(self, body: List[Op]) -> NocacheOp:
        region = NocacheOp(region_id=len(self.nocache_regions), body=list(body))
        self.nocache_regions[region.region_id] = region
        self.has_nocache_code = True
        return region

    def iter_ops(self) -> Iterator[Op]:
        """All top-level and function-level operations, depth first."""
        stack: List[Op] = list(reversed(self.ops))
        for func in self.functions.values():
            stack.extend(reversed(func.body))
        while stack:
            op = stack.pop()
            yield op
            if isinstance(op, NocacheOp):
                stack.extend(reversed(op.body))


__all__ = ["CompiledTemplate"]
