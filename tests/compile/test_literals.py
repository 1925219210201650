"""
User literals on the engine: verbatim output and delimiter conflicts.
"""

import pytest

from tplcache import Engine, LiteralConflictError
from tplcache.errors import CompilerError


def test_literal_is_emitted_verbatim(engine: Engine, templates):
    templates.set("page.tpl", "a {{b}} {$x}")
    engine.assign("x", 1)

    with pytest.raises(CompilerError):
        engine.fetch("page.tpl")

    engine.add_literals(["{{", "}}"])
    assert engine.fetch("page.tpl") == "a {{b}} 1"


def test_literal_conflicting_with_delimiter(engine: Engine):
    with pytest.raises(LiteralConflictError) as exc:
        engine.add_literals(["<<", "}"])
    assert exc.value.literals == ["}"]
    assert engine.get_literals() == []

    engine.left_delimiter = "<%"
    with pytest.raises(LiteralConflictError):
        engine.set_literals("<%")


def test_set_literals_replaces(engine: Engine):
    engine.add_literals("{{")
    engine.set_literals(["[["])
    assert engine.get_literals() == ["[["]
    engine.set_literals(None)
    assert engine.get_literals() == []
