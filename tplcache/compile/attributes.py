"""
Parsing of tag attributes.

    {include file="page.tpl"}      named attribute
    {include "page.tpl"}           shorthand, positional
    {assign var=x value=$y nocache}  bare word flag
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from .ops import Literal, Value, VarRef

_ARG_RE = re.compile(
    r"""
    \s*
    (?:(?P<key>[A-Za-z_]\w*)\s*=\s*)?
    (?P<value>
        "(?:[^"\\]|\\.)*"
      | '(?:[^'\\]|\\.)*'
      | \$[A-Za-z_]\w*
      | -?\d+
      | [A-Za-z_][\w.\-/]*
    )
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class RawArg:
    key: Optional[str]
    text: str


def split_args(text: str) -> List[RawArg]:
    """
    Splits the attribute part of a tag.

    Raises:
        ValueError: Text that is not an attribute
    """
    args: List[RawArg] = []
    pos = 0
    text = text.strip()
    while pos < len(text):
        m = _ARG_RE.match(text, pos)
        if not m or m.end() == pos:
            raise ValueError(f"unexpected '{text[pos:]}'")
        args.append(RawArg(m.group("key"), m.group("value")))
        pos = m.end()
        while pos < len(text) and text[pos].isspace():
            pos += 1
    return args


def parse_value(text: str) -> Value:
    if text.startswith("$"):
        return VarRef(text[1:])
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        body = text[1:-1]
        return Literal(re.sub(r"\\(.)", r"\1", body))
    if re.fullmatch(r"-?\d+", text):
        return Literal(int(text))
    if text in ("true", "false"):
        return Literal(text == "true")
    return Literal(text)


def variable_name(value: Value) -> Optional[str]:
    """Name of a variable reference given as $name, "name" or a bare word."""
    if isinstance(value, VarRef):
        return value.name
    if isinstance(value, Literal) and isinstance(value.value, str) and re.fullmatch(r"[A-Za-z_]\w*", value.value):
        return value.value
    return None


__all__ = ["RawArg", "split_args", "parse_value", "variable_name"]
