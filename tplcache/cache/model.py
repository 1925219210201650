"""
Cached rendering of a template.

A cached artifact is a list of segments: literal text produced while the
cache was generated, references to nocache regions of the compiled unit
that are re-executed on every replay, and sub-template includes whose
rendering ran nocache code and is therefore repeated on every replay.
The nocache snapshot holds the variable values captured by {make_nocache}
during generation.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..types import TemplateId

SEGMENT_TEXT = "text"
SEGMENT_NOCACHE = "nocache"
SEGMENT_INCLUDE = "include"

Segment = Tuple[str, Any]  # ("text", str) | ("nocache", region_id) | ("include", resource)


@dataclass
class CachedArtifact:
    template_id: TemplateId
    segments: List[Segment] = field(default_factory=list)
    nocache_vars: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)
    lifetime: int = 3600
    source_timestamp: float = 0.0
    has_nocache_code: bool = False

    @property
    def literal_content(self) -> str:
        """Concatenated literal text (nocache regions left out)."""
        return "".join(value for kind, value in self.segments if kind == SEGMENT_TEXT)

    def to_dict(self) -> dict:
        return {
            "id": {
                "resource": self.template_id.resource,
                "cache_id": self.template_id.cache_id,
                "compile_id": self.template_id.compile_id,
            },
            "segments": [[kind, value] for kind, value in self.segments],
            "nocache_vars": self.nocache_vars,
            "timestamp": self.timestamp,
            "lifetime": self.lifetime,
            "source_timestamp": self.source_timestamp,
            "has_nocache_code": self.has_nocache_code,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CachedArtifact:
        ident = data.get("id") or {}
        return cls(
            template_id=TemplateId(
                resource=str(ident.get("resource", "")),
                cache_id=ident.get("cache_id"),
                compile_id=ident.get("compile_id"),
            ),
            segments=[(str(kind), value) for kind, value in data.get("segments", [])],
            nocache_vars=dict(data.get("nocache_vars") or {}),
            timestamp=float(data.get("timestamp", 0.0)),
            lifetime=int(data.get("lifetime", 0)),
            source_timestamp=float(data.get("source_timestamp", 0.0)),
            has_nocache_code=bool(data.get("has_nocache_code", False)),
        )


def id_matches(template_id: TemplateId, resource: Optional[str], cache_id: Optional[str],
               compile_id: Optional[str]) -> bool:
    """None acts as a wildcard for each part."""
    if resource is not None and template_id.resource != resource:
        return False
    if cache_id is not None and template_id.cache_id != cache_id:
        return False
    if compile_id is not None and template_id.compile_id != compile_id:
        return False
    return True


__all__ = ["CachedArtifact", "Segment", "SEGMENT_TEXT", "SEGMENT_NOCACHE", "SEGMENT_INCLUDE", "id_matches"]
