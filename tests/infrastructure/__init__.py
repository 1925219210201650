"""
Shared test infrastructure.

Modules:
- file_utils: creating files and directories
- engine_utils: inspecting engine state (cached artifacts, capture depth)
"""

from .engine_utils import cached_artifact, render_depth
from .file_utils import write, write_template

__all__ = ["write", "write_template", "cached_artifact", "render_depth"]
