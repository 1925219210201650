from __future__ import annotations

import inspect
from typing import Any

from .base import CapabilityRegistry
from ..cache.base import CacheResource
from ..errors import ConstraintViolationError
from ..resources.base import Resource


class ClassRegistry(CapabilityRegistry[type]):
    """Classes made available to templates under an alias."""

    kind = "class"

    def _build_entry(self, name: str, target: Any, **constraints: Any) -> type:
        if not inspect.isclass(target):
            raise ConstraintViolationError(f"Undefined class '{target!r}' in register template class")
        return target


class ResourceRegistry(CapabilityRegistry[Resource]):
    """Template source handlers by resource type."""

    kind = "resource"

    def _build_entry(self, name: str, target: Any, **constraints: Any) -> Resource:
        if not isinstance(target, Resource):
            raise ConstraintViolationError(f"Resource handler '{name}' must be a Resource instance")
        return target


class CacheResourceRegistry(CapabilityRegistry[CacheResource]):
    """Cache storage handlers by caching type."""

    kind = "cache resource"

    def _build_entry(self, name: str, target: Any, **constraints: Any) -> CacheResource:
        if not isinstance(target, CacheResource):
            raise ConstraintViolationError(f"Cache resource handler '{name}' must be a CacheResource instance")
        return target


__all__ = ["ClassRegistry", "ResourceRegistry", "CacheResourceRegistry"]
