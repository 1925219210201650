"""
Filter registry.

Filters are grouped by type:
  • pre     : source text before compilation
  • post    : compiled unit after compilation
  • output  : final content of a render
  • variable: every variable value written to the output
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Dict, List, Union

from ..errors import FilterNotCallableError, IllegalFilterTypeError, NotFoundError
from ..types import FILTER_TYPES

logger = logging.getLogger(__name__)

FilterFunc = Callable[..., Any]


def _check_filter_type(filter_type: str) -> None:
    if filter_type not in FILTER_TYPES:
        raise IllegalFilterTypeError(filter_type)


def filter_name(callback: Any) -> str:
    """Internal name of a filter callback."""
    if isinstance(callback, str):
        return callback
    qualname = getattr(callback, "__qualname__", None)
    module = getattr(callback, "__module__", None)
    if qualname and "<lambda>" not in qualname:
        return f"{module}.{qualname}" if module else qualname
    if qualname:
        return "closure"
    return type(callback).__name__


class FilterRegistry:
    """Registered filters, ordered by registration within each type."""

    def __init__(self):
        self._by_type: Dict[str, Dict[str, FilterFunc]] = {}

    def register(self, filter_type: str, callback: FilterFunc, name: str | None = None) -> str:
        """
        Registers a filter.

        Args:
            filter_type: One of pre/post/output/variable
            callback: Callable applied by the renderer
            name: Optional explicit name (defaults to the callable's qualified name)

        Returns:
            Name the filter was registered under

        Raises:
            IllegalFilterTypeError: Unknown filter type
            FilterNotCallableError: callback is not callable
        """
        _check_filter_type(filter_type)
        name = name if name is not None else filter_name(callback)
        if not callable(callback):
            raise FilterNotCallableError(f"{filter_type}filter '{name}' not callable")
        self._by_type.setdefault(filter_type, {})[name] = callback
        logger.debug(f"Registered {filter_type} filter '{name}'")
        return name

    def unregister(self, filter_type: str, callback_or_name: Union[str, FilterFunc]) -> None:
        _check_filter_type(filter_type)
        bucket = self._by_type.get(filter_type)
        if not bucket:
            return
        bucket.pop(filter_name(callback_or_name), None)
        if not bucket:
            del self._by_type[filter_type]

    def load(self, filter_type: str, spec: str) -> str:
        """
        Imports a filter by 'package.module:callable' and registers it.

        Raises:
            NotFoundError: Module or attribute cannot be found
            FilterNotCallableError: Attribute is not callable
        """
        _check_filter_type(filter_type)
        module_name, _, attr = spec.partition(":")
        if not module_name or not attr:
            raise NotFoundError(f"{filter_type}filter '{spec}' not found: expected 'module:callable'")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise NotFoundError(f"{filter_type}filter '{spec}' not found") from e
        target = getattr(module, attr, None)
        if target is None:
            raise NotFoundError(f"{filter_type}filter '{spec}' not found")
        if isinstance(target, type):
            # classes are used through their `execute` entry point
            target = getattr(target, "execute", target)
        if not callable(target):
            raise FilterNotCallableError(f"{filter_type}filter '{spec}' not callable")
        return self.register(filter_type, target, name=spec)

    def unload(self, filter_type: str, spec: str) -> None:
        self.unregister(filter_type, spec)

    def lookup(self, filter_type: str, name: str) -> FilterFunc:
        _check_filter_type(filter_type)
        try:
            return self._by_type[filter_type][name]
        except KeyError:
            raise NotFoundError(f"'{name}' is not a registered {filter_type} filter") from None

    def get_filters(self, filter_type: str) -> List[FilterFunc]:
        _check_filter_type(filter_type)
        return list(self._by_type.get(filter_type, {}).values())

    def has(self, filter_type: str, name: str) -> bool:
        return name in self._by_type.get(filter_type, {})

    def apply(self, filter_type: str, value: Any, *args: Any) -> Any:
        """Runs value through every filter of the given type, in registration order."""
        for func in self.get_filters(filter_type):
            value = func(value, *args)
        return value


__all__ = ["FilterRegistry", "FilterFunc", "filter_name"]
