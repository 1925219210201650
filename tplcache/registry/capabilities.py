"""
Capability descriptors for registered objects.

Members allowed on a registered object are classified once, at
registration time, into callables and properties. Template access
consults the recorded descriptor instead of re-inspecting the object.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Optional, Union

_MISSING = object()


@dataclass(frozen=True)
class CallableMember:
    """Member invoked as a method: `obj.name(*args)`."""
    name: str


@dataclass(frozen=True)
class PropertyMember:
    """Member read as a value: `obj.name`."""
    name: str


Capability = Union[CallableMember, PropertyMember]


def describe_member(target: Any, name: str) -> Optional[Capability]:
    """
    Classifies a member of target without running property getters.

    Returns:
        CallableMember, PropertyMember or None when the member does not exist
    """
    raw = inspect.getattr_static(target, name, _MISSING)
    if raw is _MISSING:
        return None
    if isinstance(raw, property):
        return PropertyMember(name)
    if isinstance(raw, (staticmethod, classmethod)) or callable(raw):
        return CallableMember(name)
    return PropertyMember(name)


__all__ = ["CallableMember", "PropertyMember", "Capability", "describe_member"]
