"""
Common contract of the capability registries.

A registry is a name -> target map. Targets are validated before
insertion: a rejected registration never leaves a partial entry behind.
Unregistering is idempotent; lookup of an unknown name raises NotFoundError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Generic, Iterator, List, TypeVar

from ..errors import NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CapabilityRegistry(Generic[T]):
    """Base name -> entry registry with validation hooks."""

    #: Human readable registry kind, used in messages
    kind: str = "entry"

    def __init__(self):
        self._entries: Dict[str, T] = {}

    def _build_entry(self, name: str, target: Any, **constraints: Any) -> T:
        """
        Validates target and builds the stored entry.

        Must raise before anything is inserted when target is not acceptable.
        """
        return target

    def register(self, name: str, target: Any, **constraints: Any) -> None:
        entry = self._build_entry(name, target, **constraints)
        if name in self._entries:
            logger.warning(f"{self.kind.capitalize()} '{name}' overwrites existing registration")
        self._entries[name] = entry

    def unregister(self, name: str) -> None:
        self._entries.pop(name, None)

    def lookup_entry(self, name: str) -> T:
        try:
            return self._entries[name]
        except KeyError:
            raise NotFoundError(f"'{name}' is not a registered {self.kind}") from None

    def lookup(self, name: str) -> Any:
        return self.lookup_entry(name)

    def names(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CapabilityRegistry"]
