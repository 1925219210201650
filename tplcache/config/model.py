"""
Engine configuration model.

Every key is optional; an empty mapping gives the defaults of a plain
Engine(). Values coming from YAML are normalized here, so the engine only
ever sees canonical types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..types import CachingMode, CompileCheck, coerce_caching, coerce_compile_check

_KNOWN_KEYS = {
    "caching",
    "cache_lifetime",
    "compile_check",
    "caching_type",
    "cache_dir",
    "template_dir",
    "error_reporting",
    "mute_undefined_or_null_warnings",
    "left_delimiter",
    "right_delimiter",
    "literals",
    "default_resource_type",
    "globals",
}


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, Path)):
        return [str(value)]
    return [str(v) for v in value]


def _as_level(value: Any) -> Optional[int]:
    """Logging level given as a name ('warning') or a number."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"error_reporting: expected a logging level, got {value!r}")
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    if not isinstance(level, int):
        raise RuntimeError(f"error_reporting: unknown logging level {value!r}")
    return level


@dataclass
class EngineConfig:
    caching: CachingMode = CachingMode.OFF
    cache_lifetime: int = 3600
    compile_check: CompileCheck = CompileCheck.ON
    caching_type: str = "memory"
    cache_dir: Optional[Path] = None
    template_dirs: List[Path] = field(default_factory=list)
    error_reporting: Optional[int] = None
    mute_undefined_or_null_warnings: bool = False
    left_delimiter: str = "{"
    right_delimiter: str = "}"
    literals: List[str] = field(default_factory=list)
    default_resource_type: str = "file"
    globals: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> EngineConfig:
        """
        Builds the configuration from a mapping (parsed YAML).

        Args:
            data: Raw configuration
            base_dir: Directory that relative cache/template directories are resolved against

        Raises:
            RuntimeError: Unknown keys or malformed values
        """
        unknown = sorted(set(data) - _KNOWN_KEYS)
        if unknown:
            raise RuntimeError(f"Unknown config key(s): {', '.join(unknown)}")

        def _path(value: Any) -> Path:
            p = Path(str(value))
            if base_dir is not None and not p.is_absolute():
                p = (base_dir / p).resolve()
            return p

        try:
            caching = coerce_caching(data.get("caching"))
            compile_check = coerce_compile_check(data.get("compile_check"))
        except ValueError as e:
            raise RuntimeError(str(e)) from None

        globals_raw = data.get("globals") or {}
        if not isinstance(globals_raw, dict):
            raise RuntimeError("globals: expected a mapping")

        cache_dir = data.get("cache_dir")
        return cls(
            caching=caching,
            cache_lifetime=int(data.get("cache_lifetime", 3600)),
            compile_check=compile_check,
            caching_type=str(data.get("caching_type", "memory")),
            cache_dir=_path(cache_dir) if cache_dir is not None else None,
            template_dirs=[_path(d) for d in _as_list(data.get("template_dir"))],
            error_reporting=_as_level(data.get("error_reporting")),
            mute_undefined_or_null_warnings=bool(data.get("mute_undefined_or_null_warnings", False)),
            left_delimiter=str(data.get("left_delimiter", "{")),
            right_delimiter=str(data.get("right_delimiter", "}")),
            literals=_as_list(data.get("literals")),
            default_resource_type=str(data.get("default_resource_type", "file")),
            globals=dict(globals_raw),
        )


__all__ = ["EngineConfig"]
