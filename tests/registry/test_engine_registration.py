"""
Registration API exposed on engine and templates (shared engine registries).
"""

from unittest.mock import Mock

import pytest

from tplcache import Engine
from tplcache.cache import MemoryCacheResource
from tplcache.errors import ConstraintViolationError, FilterNotCallableError, NotFoundError


class Counter:
    def __init__(self):
        self.value = 7

    def next(self):
        self.value += 1
        return self.value


def test_template_registration_reaches_engine(engine: Engine, templates):
    templates.set("page.tpl", "x")
    tpl = engine.create_template("page.tpl")
    tpl.register_object("counter", Counter(), ["next", "value"])

    assert isinstance(engine.get_registered_object("counter"), Counter)

    engine.unregister_object("counter")
    with pytest.raises(NotFoundError):
        tpl.get_registered_object("counter")


def test_registered_object_in_template(engine: Engine):
    engine.register_object("counter", Counter(), ["next", "value"])

    assert engine.fetch("string:{$counter->value}/{$counter->next}") == "7/8"


def test_disallowed_member_fails_render(engine: Engine):
    engine.register_object("counter", Counter(), ["value"])

    with pytest.raises(ConstraintViolationError):
        engine.fetch("string:{$counter->next}")
    assert engine.output.level == 0


def test_filters_of_every_stage(engine: Engine, templates):
    templates.set("page.tpl", "a {$x} b")
    engine.assign("x", "v")
    engine.register_filter("pre", lambda src, tpl: src.replace("a", "A"), name="pre_a")
    engine.register_filter("variable", lambda value, tpl: f"[{value}]", name="brackets")
    engine.register_filter("output", lambda out, tpl: out + "!", name="bang")

    assert engine.fetch("page.tpl") == "A [v] b!"


def test_post_filter_must_return_compiled_unit(engine: Engine):
    engine.register_filter("post", lambda compiled, tpl: "broken", name="broken")

    with pytest.raises(TypeError):
        engine.fetch("string:hello")


def test_register_default_template_handler(engine: Engine):
    with pytest.raises(FilterNotCallableError):
        engine.register_default_template_handler("nope")

    engine.register_default_template_handler(lambda kind, name: f"generated {name}")
    assert engine.fetch("file:missing.tpl") == "generated missing.tpl"


def test_cache_resource_must_be_cache_resource(engine: Engine):
    with pytest.raises(ConstraintViolationError):
        engine.register_cache_resource("bad", object())

    handler = Mock(spec=MemoryCacheResource)
    engine.register_cache_resource("mocked", handler)
    engine.caching_type = "mocked"
    assert engine.get_cache_resource() is handler

    engine.unregister_cache_resource("mocked")
    engine.unregister_cache_resource("mocked")
    with pytest.raises(NotFoundError):
        engine.get_cache_resource()


def test_unknown_resource_type(engine: Engine):
    with pytest.raises(NotFoundError):
        engine.fetch("nosuch:page.tpl")
    engine.unregister_resource("dict")
    with pytest.raises(NotFoundError):
        engine.fetch("page.tpl")


def test_register_class(engine: Engine):
    engine.register_class("Counter", Counter)
    assert engine.registries.classes.lookup("Counter") is Counter
    engine.unregister_class("Counter")
    assert "Counter" not in engine.registries.classes
