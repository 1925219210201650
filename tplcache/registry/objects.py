from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from .base import CapabilityRegistry
from .capabilities import Capability, CallableMember, describe_member
from ..errors import ConstraintViolationError, NotFoundError


@dataclass(frozen=True)
class RegisteredObject:
    """
    Object exposed to templates.

    An empty allow-list means every member is reachable.
    """
    target: Any
    allowed: Dict[str, Capability] = field(default_factory=dict)
    format: bool = True
    block_methods: Tuple[str, ...] = ()


def _as_names(value: Optional[Iterable[str] | str]) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


class ObjectRegistry(CapabilityRegistry[RegisteredObject]):
    kind = "object"

    def _build_entry(
        self,
        name: str,
        target: Any,
        allowed: Optional[Iterable[str] | str] = None,
        format: bool = True,
        block_methods: Optional[Iterable[str] | str] = None,
    ) -> RegisteredObject:
        capabilities: Dict[str, Capability] = {}
        for member in _as_names(allowed):
            cap = describe_member(target, member)
            if cap is None:
                raise ConstraintViolationError(
                    f"Undefined method or property '{member}' in registered object"
                )
            capabilities[member] = cap

        blocks = _as_names(block_methods)
        for member in blocks:
            if not isinstance(describe_member(target, member), CallableMember):
                raise ConstraintViolationError(f"Undefined method '{member}' in registered object")

        return RegisteredObject(
            target=target,
            allowed=capabilities,
            format=bool(format),
            block_methods=blocks,
        )

    def lookup(self, name: str) -> Any:
        return self.lookup_entry(name).target

    def access(self, name: str, member: str, *args: Any) -> Any:
        """
        Reads a property or calls a method of a registered object.

        Raises:
            NotFoundError: Unknown object or member
            ConstraintViolationError: Member is not in the allow-list
        """
        entry = self.lookup_entry(name)
        if entry.allowed:
            cap = entry.allowed.get(member)
            if cap is None:
                raise ConstraintViolationError(f"Not allowed method or property '{member}' of object '{name}'")
        else:
            cap = describe_member(entry.target, member)
            if cap is None:
                raise NotFoundError(f"Undefined method or property '{member}' of object '{name}'")

        value = getattr(entry.target, member)
        if isinstance(cap, CallableMember):
            return value(*args)
        return value


__all__ = ["RegisteredObject", "ObjectRegistry"]
