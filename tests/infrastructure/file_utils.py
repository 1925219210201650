"""
File helpers for tests.
"""

from __future__ import annotations

import textwrap
from pathlib import Path


def write(p: Path, text: str) -> Path:
    """
    Writes text to a file, creating parent directories as needed.

    Args:
        p: File path
        text: Content to write

    Returns:
        Path of the written file
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def write_template(root: Path, name: str, content: str) -> Path:
    """Writes a template under <root>/templates, dedenting the content."""
    return write(root / "templates" / name, textwrap.dedent(content))


__all__ = ["write", "write_template"]
