"""
Nested output capture.

Every fetch/display opens a capture level; nested renders open levels on
top of it. The guard records the depth at entry and, on failure, closes
every level opened since, however deep the failing render was nested.
"""

from __future__ import annotations

import io
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional, TextIO


class OutputStack:
    def __init__(self, sink: Optional[TextIO] = None):
        self._buffers: List[io.StringIO] = []
        self._sink = sink

    @property
    def sink(self) -> TextIO:
        # resolved on use: sys.stdout may be swapped (e.g. captured in tests)
        return self._sink if self._sink is not None else sys.stdout

    @property
    def level(self) -> int:
        return len(self._buffers)

    def start(self) -> int:
        """Opens a new capture level and returns the new depth."""
        self._buffers.append(io.StringIO())
        return self.level

    def write(self, text: str) -> None:
        if not text:
            return
        if self._buffers:
            self._buffers[-1].write(text)
        else:
            self.sink.write(text)

    def get_contents(self) -> str:
        if not self._buffers:
            raise RuntimeError("No output capture level is open")
        return self._buffers[-1].getvalue()

    def get_clean(self) -> str:
        """Closes the top level and returns what it captured."""
        if not self._buffers:
            raise RuntimeError("No output capture level is open")
        return self._buffers.pop().getvalue()

    def end_clean(self) -> None:
        """Closes the top level, discarding its content."""
        if not self._buffers:
            raise RuntimeError("No output capture level is open")
        self._buffers.pop()

    def end_flush(self) -> None:
        """Closes the top level, passing its content to the level below (or the sink)."""
        self.write(self.get_clean())

    def unwind(self, level: int) -> None:
        while self.level > level:
            self._buffers.pop()

    @contextmanager
    def guard(self, level: Optional[int] = None) -> Iterator[int]:
        """
        Restores the capture depth on failure.

        Args:
            level: Depth to unwind to (defaults to the current depth)
        """
        if level is None:
            level = self.level
        try:
            yield level
        except BaseException:
            self.unwind(level)
            raise


__all__ = ["OutputStack"]
