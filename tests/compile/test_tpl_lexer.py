"""
Lexer: text/tag splitting, comments, custom delimiters and literals.
"""

import pytest

from tplcache.compile.lexer import Lexer, TokenKind
from tplcache.errors import CompilerError


def kinds(tokens):
    return [(t.kind, t.value) for t in tokens]


def test_text_and_tags():
    tokens = Lexer().tokenize("Hello {$name}!")
    assert kinds(tokens) == [
        (TokenKind.TEXT, "Hello "),
        (TokenKind.TAG, "$name"),
        (TokenKind.TEXT, "!"),
    ]


def test_comments_are_dropped_and_lines_counted():
    tokens = Lexer().tokenize("a{* one\ntwo *}b\n{$x}")
    assert kinds(tokens) == [(TokenKind.TEXT, "ab\n"), (TokenKind.TAG, "$x")]
    assert tokens[1].line == 3


def test_delimiter_followed_by_whitespace_is_text():
    tokens = Lexer().tokenize("function() { return 1; }")
    assert kinds(tokens) == [(TokenKind.TEXT, "function() { return 1; }")]


def test_custom_delimiters():
    tokens = Lexer("<%", "%>").tokenize("{x} <%$y%>")
    assert kinds(tokens) == [(TokenKind.TEXT, "{x} "), (TokenKind.TAG, "$y")]


def test_literals_are_emitted_verbatim():
    tokens = Lexer(literals=["{{", "{{{"]).tokenize("a {{{b}}} {$c}")
    # the longest literal wins
    assert kinds(tokens) == [(TokenKind.TEXT, "a {{{b}}} "), (TokenKind.TAG, "$c")]


def test_unclosed_tag_and_comment():
    with pytest.raises(CompilerError) as exc:
        Lexer().tokenize("line1\n{$x", "page.tpl")
    assert exc.value.template_name == "page.tpl"
    assert exc.value.line == 2

    with pytest.raises(CompilerError):
        Lexer().tokenize("{* never closed")
