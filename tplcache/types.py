from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


class CachingMode(enum.IntEnum):
    """Whether and how output caching applies to a template."""
    OFF = 0
    CURRENT = 1    # lifetime taken from the template at check time
    LIFETIME = 2   # lifetime saved into the artifact at write time


class CompileCheck(enum.IntEnum):
    """Whether the template source is re-validated for freshness."""
    OFF = 0
    ON = 1
    COMPILED_FILEMTIME = 2


class FunctionMode(enum.IntEnum):
    FETCH = 0
    DISPLAY = 1
    IS_CACHED = 2


class ObjKind(enum.IntEnum):
    """Kind marker of variable containers (root engine, template, data-only)."""
    ENGINE = 1
    TEMPLATE = 2
    DATA = 4


FILTER_TYPES = ("pre", "post", "output", "variable")


def _coerce_enum(enum_cls, value, what: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool):
        return enum_cls(int(value))
    if isinstance(value, int):
        return enum_cls(value)
    if isinstance(value, str):
        raw = value.strip().lower()
        if raw.isdigit():
            return enum_cls(int(raw))
        try:
            return enum_cls[raw.upper()]
        except KeyError:
            pass
    raise ValueError(f"Invalid {what} value: {value!r}")


def coerce_caching(value: Union[CachingMode, int, str, bool, None]) -> CachingMode:
    """Normalizes a caching flag into its canonical integer enum."""
    if value is None:
        return CachingMode.OFF
    return _coerce_enum(CachingMode, value, "caching")


def coerce_compile_check(value: Union[CompileCheck, int, str, bool, None]) -> CompileCheck:
    if value is None:
        return CompileCheck.ON
    return _coerce_enum(CompileCheck, value, "compile_check")


@dataclass(frozen=True)
class TemplateId:
    """
    Identity of a template invocation.

    Two invocations with equal ids resolve the same source and share
    cache/compile artifacts.
    """
    resource: str
    cache_id: Optional[str] = None
    compile_id: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.resource}#{self.cache_id or ''}#{self.compile_id or ''}"


__all__ = [
    "CachingMode",
    "CompileCheck",
    "FunctionMode",
    "ObjKind",
    "FILTER_TYPES",
    "coerce_caching",
    "coerce_compile_check",
    "TemplateId",
]
