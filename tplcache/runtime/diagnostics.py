"""
Ambient diagnostics of a render.

Two knobs can be narrowed for the duration of a render:
  • verbosity: level of the `tplcache.render` logger
  • suppression of UndefinedVariableWarning

Both are reverted on every exit path, in LIFO order, so nested renders
never leave an outer render with the wrong settings.
"""

from __future__ import annotations

import logging
import warnings
from contextlib import ExitStack, contextmanager
from typing import Iterator, Optional

RENDER_LOGGER = "tplcache.render"


class UndefinedVariableWarning(UserWarning):
    """A template read a variable that is not defined."""
    pass


class SuppressionHandler:
    """Ignores undefined-variable warnings while active."""

    def __init__(self):
        self._ctx: Optional[warnings.catch_warnings] = None

    @property
    def active(self) -> bool:
        return self._ctx is not None

    def activate(self) -> None:
        if self._ctx is not None:
            return
        self._ctx = warnings.catch_warnings()
        self._ctx.__enter__()
        warnings.simplefilter("ignore", UndefinedVariableWarning)

    def deactivate(self) -> None:
        if self._ctx is None:
            return
        ctx, self._ctx = self._ctx, None
        ctx.__exit__(None, None, None)


class Diagnostics:
    def __init__(self, logger_name: str = RENDER_LOGGER):
        self.logger = logging.getLogger(logger_name)

    def get_ambient_verbosity(self) -> int:
        return self.logger.level

    def set_ambient_verbosity(self, level: int) -> None:
        self.logger.setLevel(level)

    def install_suppression_handler(self) -> SuppressionHandler:
        handler = SuppressionHandler()
        handler.activate()
        return handler

    def remove_suppression_handler(self, handler: SuppressionHandler) -> None:
        handler.deactivate()

    @contextmanager
    def scoped(self, verbosity: Optional[int] = None, mute: bool = False) -> Iterator[None]:
        with ExitStack() as stack:
            if verbosity is not None:
                previous = self.get_ambient_verbosity()
                self.set_ambient_verbosity(verbosity)
                stack.callback(self.set_ambient_verbosity, previous)
            if mute:
                handler = self.install_suppression_handler()
                stack.callback(self.remove_suppression_handler, handler)
            yield


__all__ = ["RENDER_LOGGER", "UndefinedVariableWarning", "SuppressionHandler", "Diagnostics"]
