"""
Lexer of the template source.

Splits the source into text runs and tags enclosed by the configured
delimiters. Comments ({* ... *}) are dropped. User-defined literals and
delimiters followed by whitespace are kept as plain text.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from ..errors import CompilerError


class TokenKind(enum.Enum):
    TEXT = "TEXT"
    TAG = "TAG"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    line: int       # line number (starting at 1)

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.value!r}, line {self.line})"


class Lexer:
    def __init__(self, left: str = "{", right: str = "}", literals: Iterable[str] = ()):
        if not left or not right:
            raise ValueError("Delimiters must not be empty")
        self.left = left
        self.right = right
        # longest literal first, so overlapping literals resolve greedily
        self.literals: Sequence[str] = sorted({lit for lit in literals if lit}, key=len, reverse=True)

    def tokenize(self, source: str, template_name: str = "") -> List[Token]:
        tokens: List[Token] = []
        text_parts: List[str] = []
        text_line = 1
        line = 1
        pos = 0
        n = len(source)

        def flush_text() -> None:
            nonlocal text_parts
            if text_parts:
                tokens.append(Token(TokenKind.TEXT, "".join(text_parts), text_line))
                text_parts = []

        def add_text(chunk: str) -> None:
            nonlocal text_line
            if not text_parts:
                text_line = line
            text_parts.append(chunk)

        while pos < n:
            literal = self._literal_at(source, pos)
            if literal is not None:
                add_text(literal)
                line += literal.count("\n")
                pos += len(literal)
                continue

            if source.startswith(self.left, pos):
                inner_start = pos + len(self.left)

                # comment
                if source.startswith("*", inner_start):
                    end = source.find("*" + self.right, inner_start + 1)
                    if end < 0:
                        raise CompilerError("unclosed comment", template_name, line)
                    chunk = source[pos:end + 1 + len(self.right)]
                    line += chunk.count("\n")
                    pos += len(chunk)
                    continue

                # delimiter followed by whitespace is not a tag
                if inner_start >= n or source[inner_start].isspace():
                    add_text(self.left)
                    pos = inner_start
                    continue

                end = source.find(self.right, inner_start)
                if end < 0:
                    raise CompilerError(f"missing closing delimiter '{self.right}'", template_name, line)
                body = source[inner_start:end]
                flush_text()
                tokens.append(Token(TokenKind.TAG, body.strip(), line))
                line += body.count("\n")
                pos = end + len(self.right)
                continue

            ch = source[pos]
            add_text(ch)
            if ch == "\n":
                line += 1
            pos += 1

        flush_text()
        return tokens

    def _literal_at(self, source: str, pos: int):
        for lit in self.literals:
            if source.startswith(lit, pos):
                return lit
        return None


__all__ = ["Lexer", "Token", "TokenKind"]
