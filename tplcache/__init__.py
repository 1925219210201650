"""
Template render/cache orchestration engine.

Typical use:

    engine = Engine()
    engine.assign("name", "World")
    engine.fetch("string:Hello {$name}")
"""

from __future__ import annotations

from .config import EngineConfig, load_config
from .data import DataObject
from .engine import Engine
from .errors import (
    CompilerError,
    ConstraintViolationError,
    FilterNotCallableError,
    IllegalFilterTypeError,
    LiteralConflictError,
    MissingParameterError,
    MissingVariableError,
    NotFoundError,
    TplUserError,
    TypeMismatchError,
)
from .template import Template
from .types import CachingMode, CompileCheck, FunctionMode, TemplateId
from .version import tool_version

__all__ = [
    "Engine",
    "Template",
    "DataObject",
    "EngineConfig",
    "load_config",
    "CachingMode",
    "CompileCheck",
    "FunctionMode",
    "TemplateId",
    "TplUserError",
    "MissingParameterError",
    "TypeMismatchError",
    "IllegalFilterTypeError",
    "FilterNotCallableError",
    "ConstraintViolationError",
    "NotFoundError",
    "LiteralConflictError",
    "CompilerError",
    "MissingVariableError",
    "tool_version",
]
