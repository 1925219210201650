"""
Variable scopes of templates and data objects.

A scope holds two ordered mappings: template variables and config
variables. The runtime controller snapshots a scope before rendering a
reused template and restores it afterwards, so that mutations made during
one render never leak into the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass
class Variable:
    """A template variable value plus its nocache flag."""
    value: Any = None
    nocache: bool = False

    def copy(self) -> Variable:
        return Variable(self.value, self.nocache)

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)


@dataclass(frozen=True)
class ScopeSnapshot:
    """Saved state of a VariableScope (see VariableScope.snapshot)."""
    variables: Dict[str, Variable]
    config: Dict[str, Any]


class VariableScope:
    """Ordered variable bindings attached to a template or data object."""

    def __init__(self):
        self.variables: Dict[str, Variable] = {}
        self.config: Dict[str, Any] = {}

    # --------------------------- variables --------------------------- #

    def get(self, name: str) -> Optional[Variable]:
        return self.variables.get(name)

    def has(self, name: str) -> bool:
        return name in self.variables

    def set(self, name: str, value: Any, nocache: bool = False) -> None:
        self.variables[name] = Variable(value, nocache)

    def remove(self, name: str) -> None:
        self.variables.pop(name, None)

    def merge_defaults(self, defaults: Mapping[str, Variable]) -> None:
        """
        Merges variables as defaults underneath the existing bindings.

        Existing local bindings are kept; only missing names are added.
        Order: defaults first, then local bindings.
        """
        if not defaults:
            return
        merged = {name: var.copy() for name, var in defaults.items()}
        merged.update(self.variables)
        self.variables = merged

    # --------------------------- config --------------------------- #

    def get_config(self, name: str) -> Any:
        return self.config.get(name)

    def has_config(self, name: str) -> bool:
        return name in self.config

    def set_config(self, name: str, value: Any) -> None:
        self.config[name] = value

    # --------------------------- save / restore --------------------------- #

    def snapshot(self) -> ScopeSnapshot:
        """
        Captures the current bindings.

        Variable objects are copied, so re-assigning or mutating a Variable
        after the snapshot does not change the saved state.
        """
        return ScopeSnapshot(
            variables={name: var.copy() for name, var in self.variables.items()},
            config=dict(self.config),
        )

    def restore(self, snap: ScopeSnapshot) -> None:
        self.variables = {name: var.copy() for name, var in snap.variables.items()}
        self.config = dict(snap.config)

    def clear(self) -> None:
        self.variables = {}
        self.config = {}

    def __len__(self) -> int:
        return len(self.variables)

    def __repr__(self) -> str:
        return f"VariableScope(vars={list(self.variables)}, config={list(self.config)})"


__all__ = ["Variable", "ScopeSnapshot", "VariableScope"]
