"""
Capability registries: pluggable name -> target maps consulted while
templates render (filters, objects, classes, resources, cache resources).

Registries are shared state of one engine. They are mutated only by
explicit register/unregister calls and carry no internal locking.
"""

from __future__ import annotations

from .base import CapabilityRegistry
from .capabilities import CallableMember, PropertyMember, describe_member
from .filters import FilterRegistry
from .handlers import CacheResourceRegistry, ClassRegistry, ResourceRegistry
from .objects import ObjectRegistry, RegisteredObject


class Registries:
    """All registries of one engine."""

    def __init__(self):
        self.filters = FilterRegistry()
        self.objects = ObjectRegistry()
        self.classes = ClassRegistry()
        self.resources = ResourceRegistry()
        self.cache_resources = CacheResourceRegistry()


__all__ = [
    "Registries",
    "CapabilityRegistry",
    "CallableMember",
    "PropertyMember",
    "describe_member",
    "FilterRegistry",
    "ObjectRegistry",
    "RegisteredObject",
    "ClassRegistry",
    "ResourceRegistry",
    "CacheResourceRegistry",
]
