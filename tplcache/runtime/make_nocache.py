from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from ..errors import MissingVariableError

if TYPE_CHECKING:
    from ..template import Template

logger = logging.getLogger(__name__)


class MakeNocacheRuntime:
    """
    Snapshot store bridging cache generation and cache replay.

    save():  called by compiled {make_nocache} code while the cache is
              generated; records the variable into the pending snapshot.
    store(): called before a replay; seeds the template scope with the
              snapshot of the artifact being replayed.
    """

    def save(self, tpl: Template, name: str) -> None:
        var = tpl.get_variable(name)
        if var is None:
            raise MissingVariableError(name)
        handle = tpl.cached
        if handle is not None and handle.generating:
            handle.save_nocache_var(name, var.value)
            logger.debug(f"Saved nocache variable '{name}' for {tpl.template_id}")

    def store(self, tpl: Template, snapshot: Mapping[str, Any]) -> None:
        for name, value in snapshot.items():
            tpl.assign(name, value, nocache=True)


__all__ = ["MakeNocacheRuntime"]
