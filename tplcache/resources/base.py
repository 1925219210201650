"""
Template source resources.

A resource turns a template name into source text plus a timestamp used
for freshness checks. Resources are looked up by type through the engine's
resource registry: 'file:page.tpl', 'string:Hello {$name}'.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from ..errors import NotFoundError

if TYPE_CHECKING:
    from ..engine import Engine


@dataclass(frozen=True)
class Source:
    """Loaded template source."""
    resource: str      # normalized reference 'type:name'
    name: str
    content: str
    timestamp: float


class Resource(ABC):
    """Base class of template source handlers."""

    @abstractmethod
    def load(self, name: str, engine: Engine) -> Source:
        """
        Loads a template source.

        Raises:
            NotFoundError: The template does not exist
        """
        pass

    def timestamp(self, name: str, engine: Engine) -> Optional[float]:
        """
        Current timestamp of a template source, None when it does not exist.

        Used to check a source loaded earlier for freshness. Subclasses that
        can answer without reading the content should override this.
        """
        try:
            return self.load(name, engine).timestamp
        except NotFoundError:
            return None


def split_resource_ref(ref: str, default_type: str) -> Tuple[str, str]:
    """
    Splits 'type:name' into its parts.

    Single-letter prefixes are treated as Windows drive letters, not types.
    """
    kind, sep, name = ref.partition(":")
    if not sep or len(kind) <= 1:
        return default_type, ref
    return kind, name


__all__ = ["Source", "Resource", "split_resource_ref"]
