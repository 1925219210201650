from __future__ import annotations

import time
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Tuple

from .base import Resource, Source
from ..errors import NotFoundError

if TYPE_CHECKING:
    from ..engine import Engine


class DictResource(Resource):
    """
    In-memory template sources.

    Every update bumps the timestamp of the template, so compile checks
    and cache freshness see the change even within the same clock tick.
    """

    def __init__(self, templates: Optional[Mapping[str, str]] = None, type_name: str = "dict"):
        self.type_name = type_name
        self._templates: Dict[str, Tuple[str, float]] = {}
        self._clock = 0.0
        for name, content in (templates or {}).items():
            self.set(name, content)

    def _tick(self) -> float:
        self._clock = max(time.time(), self._clock + 1e-6)
        return self._clock

    def set(self, name: str, content: str) -> None:
        self._templates[name] = (content, self._tick())

    def remove(self, name: str) -> None:
        self._templates.pop(name, None)

    def load(self, name: str, engine: Engine) -> Source:
        try:
            content, ts = self._templates[name]
        except KeyError:
            raise NotFoundError(f"Unable to load template '{self.type_name}:{name}'") from None
        return Source(resource=f"{self.type_name}:{name}", name=name, content=content, timestamp=ts)

    def timestamp(self, name: str, engine: Engine) -> Optional[float]:
        entry = self._templates.get(name)
        return None if entry is None else entry[1]


__all__ = ["DictResource"]
