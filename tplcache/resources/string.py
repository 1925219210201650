from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .base import Resource, Source

if TYPE_CHECKING:
    from ..engine import Engine


class StringResource(Resource):
    """The template name is the template source itself."""

    def load(self, name: str, engine: Engine) -> Source:
        return Source(resource=f"string:{name}", name=name, content=name, timestamp=0.0)

    def timestamp(self, name: str, engine: Engine) -> Optional[float]:
        return 0.0


__all__ = ["StringResource"]
