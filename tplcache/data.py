"""
Variable containers: the shared base of engine, templates and data objects.

Every container owns a VariableScope and an optional parent. The parent
link is weak: it is only used to look variables up along the chain and
never keeps the parent alive.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional, Union

from .scope import Variable, VariableScope
from .types import ObjKind

if TYPE_CHECKING:
    from .engine import Engine


class Data:
    """Base class of everything that can hold template variables."""

    kind: ObjKind = ObjKind.DATA

    def __init__(self, parent: Optional[Data] = None, engine: Optional[Engine] = None, name: Optional[str] = None):
        self.scope = VariableScope()
        self._parent_ref: Optional[weakref.ReferenceType] = None
        self.parent = parent
        self._engine = engine
        self.data_name = name

    # --------------------------- parent chain --------------------------- #

    @property
    def parent(self) -> Optional[Data]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, value: Optional[Data]) -> None:
        self._parent_ref = weakref.ref(value) if value is not None else None

    def _iter_chain(self) -> Iterable[Data]:
        """Yields self, then every reachable ancestor (cycle safe)."""
        seen = set()
        node: Optional[Data] = self
        while node is not None and id(node) not in seen:
            seen.add(id(node))
            yield node
            node = node.parent

    def _get_engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError(f"{type(self).__name__} is not bound to an engine")
        return self._engine

    def _is_tpl_obj(self) -> bool:
        return self.kind == ObjKind.TEMPLATE

    def defines_variable(self, name: str) -> bool:
        """True when this container or one of its ancestors binds the name."""
        return any(node.scope.has(name) for node in self._iter_chain())

    # --------------------------- convenience views --------------------------- #

    @property
    def tpl_vars(self) -> Dict[str, Variable]:
        return self.scope.variables

    @property
    def config_vars(self) -> Dict[str, Any]:
        return self.scope.config

    # --------------------------- template variables --------------------------- #

    def assign(self, name: Union[str, Mapping[str, Any]], value: Any = None, nocache: bool = False):
        """
        Assigns a template variable (or several, when given a mapping).

        Args:
            name: Variable name or mapping name -> value
            value: Value for a single variable
            nocache: Outputs of this variable become nocache regions when compiled

        Returns:
            self for chaining
        """
        if isinstance(name, Mapping):
            for key, val in name.items():
                self.scope.set(key, val, nocache)
        else:
            self.scope.set(name, value, nocache)
        return self

    def clear_assign(self, names: Union[str, Iterable[str]]):
        if isinstance(names, str):
            names = [names]
        for name in names:
            self.scope.remove(name)
        return self

    def clear_all_assign(self):
        self.scope.variables = {}
        return self

    def get_variable(self, name: str) -> Optional[Variable]:
        """
        Looks a variable up along the parent chain, then in engine globals.

        Returns:
            The Variable or None if it is not defined anywhere
        """
        for node in self._iter_chain():
            var = node.scope.get(name)
            if var is not None:
                return var
        engine = self._engine
        if engine is not None:
            return engine.global_vars.get(name)
        return None

    def get_template_vars(self, name: Optional[str] = None) -> Any:
        """
        Returns one variable value, or all visible variables as a dict.

        Inner containers win over their parents; engine globals are the
        lowest layer.
        """
        if name is not None:
            var = self.get_variable(name)
            return None if var is None else var.value

        merged: Dict[str, Any] = {}
        if self._engine is not None:
            merged.update({k: v.value for k, v in self._engine.global_vars.items()})
        for node in reversed(list(self._iter_chain())):
            merged.update({k: v.value for k, v in node.scope.variables.items()})
        return merged

    # --------------------------- config variables --------------------------- #

    def set_config_var(self, name: str, value: Any):
        self.scope.set_config(name, value)
        return self

    def get_config_vars(self, name: Optional[str] = None) -> Any:
        if name is not None:
            for node in self._iter_chain():
                if node.scope.has_config(name):
                    return node.scope.get_config(name)
            return None

        merged: Dict[str, Any] = {}
        for node in reversed(list(self._iter_chain())):
            merged.update(node.scope.config)
        return merged

    def clear_config(self, name: Optional[str] = None):
        if name is None:
            self.scope.config = {}
        else:
            self.scope.config.pop(name, None)
        return self


class DataObject(Data):
    """
    Data-only container: holds variables, never renders.

    Can be passed as `parent` to fetch/display/is_cached to provide
    a variable layer shared by several templates.
    """

    kind = ObjKind.DATA

    def __repr__(self) -> str:
        return f"DataObject(name={self.data_name!r}, vars={list(self.scope.variables)})"


__all__ = ["Data", "DataObject"]
