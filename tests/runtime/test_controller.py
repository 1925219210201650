"""
Runtime controller: fetch / display / is_cached orchestration.
"""

import logging
import warnings
from unittest.mock import Mock

import pytest

from tplcache import CachingMode, Engine, MissingParameterError, NotFoundError, TypeMismatchError
from tplcache.cache import MemoryCacheResource
from tplcache.runtime.diagnostics import RENDER_LOGGER, UndefinedVariableWarning
from tplcache.template_base import TemplateBase
from tplcache.types import FunctionMode, TemplateId


# --------------------------- template resolution --------------------------- #

def test_fetch_without_template_on_engine_raises(engine: Engine):
    with pytest.raises(MissingParameterError):
        engine.fetch()
    assert engine.output.level == 0


def test_execute_without_template_on_data_object_raises(engine: Engine):
    data = engine.create_data()
    with pytest.raises(MissingParameterError):
        engine.runtime_controller.execute(data, None, None, None, None, FunctionMode.FETCH)


def test_non_template_object_raises_type_mismatch(engine: Engine):
    with pytest.raises(TypeMismatchError):
        engine.fetch(engine.create_data())
    with pytest.raises(TypeMismatchError):
        engine.display(object())
    assert engine.output.level == 0


def test_unbound_object_raises_runtime_error():
    with pytest.raises(RuntimeError, match="not bound to an engine"):
        TemplateBase().fetch("page.tpl")


def test_fetch_resource_name(engine: Engine, templates):
    templates.set("hello.tpl", "Hello {$name}")
    engine.assign("name", "World")

    assert engine.fetch("hello.tpl") == "Hello World"
    assert engine.fetch("string:Hi {$name}") == "Hi World"


def test_fetch_template_object(engine: Engine, templates):
    templates.set("hello.tpl", "Hello {$name}")
    tpl = engine.create_template("hello.tpl")
    tpl.assign("name", "tpl")

    assert tpl.fetch() == "Hello tpl"
    assert engine.fetch(tpl) == "Hello tpl"


def test_display_writes_to_sink(engine: Engine, sink):
    engine.assign("x", 1)
    result = engine.display("string:x={$x}")

    assert result is None
    assert sink.getvalue() == "x=1"
    assert engine.output.level == 0


def test_display_inside_capture_goes_to_enclosing_level(engine: Engine, sink):
    engine.output.start()
    engine.display("string:inner")
    assert engine.output.get_clean() == "inner"
    assert sink.getvalue() == ""


def test_data_object_as_parent(engine: Engine):
    data = engine.create_data()
    data.assign("who", "data")
    engine.assign("who", "engine")

    assert engine.fetch("string:{$who}", parent=data) == "data"
    assert engine.fetch("string:{$who}") == "engine"


# --------------------------- scope isolation --------------------------- #

def test_reused_template_scope_is_restored(engine: Engine, templates):
    templates.set("page.tpl", "{assign var=x value=changed}{$x}")
    tpl = engine.create_template("page.tpl")
    tpl.assign("x", "original")

    assert tpl.fetch() == "changed"
    assert tpl.get_template_vars("x") == "original"
    # engine globals merged for the render are gone afterwards as well
    engine.assign_global("g", 1)
    tpl.fetch()
    assert "g" not in tpl.scope.variables


def test_reused_template_scope_is_restored_after_failure(engine: Engine, templates):
    templates.set("page.tpl", "{assign var=x value=changed}{call name=missing}")
    tpl = engine.create_template("page.tpl")
    tpl.assign("x", "original")

    with pytest.raises(NotFoundError):
        tpl.fetch()
    assert tpl.get_template_vars("x") == "original"


def test_one_shot_template_is_memoized_with_cleared_scope(engine: Engine, templates):
    templates.set("page.tpl", "{assign var=leak value=1}{$leak}")

    assert engine.fetch("page.tpl", "cid") == "1"

    memo = engine.template_cache[TemplateId("dict:page.tpl", "cid", None)]
    assert memo.scope.variables == {}
    assert memo.scope.config == {}
    assert memo.parent is None


def test_memoized_template_is_reused_with_empty_scope(engine: Engine, templates):
    templates.set("set.tpl", "{assign var=leak value=1}")
    templates.set("read.tpl", "[{$leak}]")

    engine.fetch("set.tpl")
    memo = engine.template_cache[TemplateId("dict:set.tpl")]
    reused = engine.create_template("set.tpl")

    assert reused is not memo
    assert reused.scope.variables == {}
    assert reused.parent is engine
    with pytest.warns(UndefinedVariableWarning):
        assert engine.fetch("read.tpl") == "[]"


def test_display_does_not_memoize(engine: Engine, templates):
    templates.set("page.tpl", "x")
    engine.display("page.tpl")
    assert engine.template_cache == {}

    engine.clear_template_cache()
    engine.fetch("page.tpl")
    assert list(engine.template_cache) == [TemplateId("dict:page.tpl")]
    engine.clear_template_cache()
    assert engine.template_cache == {}


def test_global_vars_are_defaults(engine: Engine, templates):
    templates.set("page.tpl", "{$g}/{$x}")
    engine.assign_global("g", "global")
    engine.assign_global("x", "global-x")
    tpl = engine.create_template("page.tpl")
    tpl.assign("x", "local")

    assert tpl.fetch() == "global/local"


def test_data_parent_wins_over_globals(engine: Engine, templates):
    templates.set("page.tpl", "{$x}")
    engine.assign_global("x", "G")
    data = engine.create_data().assign("x", "D")

    assert engine.fetch("page.tpl", parent=data) == "D"
    # without a binding on the chain the global still applies
    assert engine.fetch("page.tpl", parent=engine.create_data()) == "G"


def test_including_template_wins_over_globals(engine: Engine, templates):
    templates.set("outer.tpl", "{assign var=x value=O}{include file=inner.tpl}")
    templates.set("inner.tpl", "{$x}")
    engine.assign_global("x", "G")

    assert engine.fetch("outer.tpl") == "O"


# --------------------------- nesting and unwinding --------------------------- #

def test_include_renders_nested(engine: Engine, templates):
    templates.set("outer.tpl", "<{include file=inner.tpl}>")
    templates.set("inner.tpl", "inner {$x}")
    engine.assign("x", 1)

    assert engine.fetch("outer.tpl") == "<inner 1>"
    assert engine.output.level == 0


def test_capture_depth_is_restored_after_nested_failure(engine: Engine, templates):
    templates.set("outer.tpl", "a{include file=middle.tpl}b")
    templates.set("middle.tpl", "c{include file=inner.tpl}d")
    templates.set("inner.tpl", "e{call name=nope}")

    engine.output.start()
    with pytest.raises(NotFoundError):
        engine.fetch("outer.tpl")
    assert engine.output.level == 1
    assert engine.output.get_clean() == ""


def test_failed_display_writes_nothing(engine: Engine, templates, sink):
    templates.set("page.tpl", "partial{call name=nope}")
    with pytest.raises(NotFoundError):
        engine.display("page.tpl")
    assert sink.getvalue() == ""


def test_function_table_inherited_by_included_template(engine: Engine, templates):
    templates.set("lib.tpl", "{function name=hello}Hi {$who}{/function}{include file=use.tpl}")
    templates.set("use.tpl", "[{call name=hello}]")
    engine.assign("who", "there")

    assert engine.fetch("lib.tpl") == "[Hi there]"


def test_own_function_wins_over_inherited(engine: Engine, templates):
    templates.set("outer.tpl", "{function name=f}outer{/function}{include file=inner.tpl}")
    templates.set("inner.tpl", "{function name=f}inner{/function}{call name=f}")

    assert engine.fetch("outer.tpl") == "inner"


def test_parent_template_functions_merge_underneath(engine: Engine, templates):
    templates.set("lib.tpl", "{function name=a}A{/function}")
    templates.set("use.tpl", "{function name=b}B{/function}{call name=a}{call name=b}")
    lib = engine.create_template("lib.tpl")
    lib.fetch()

    assert "a" in lib.tpl_functions
    assert engine.fetch("use.tpl", parent=lib) == "AB"


# --------------------------- diagnostics --------------------------- #

def test_diagnostics_scoped_to_render(engine: Engine, templates):
    render_logger = logging.getLogger(RENDER_LOGGER)
    render_logger.setLevel(logging.DEBUG)
    engine.error_reporting = logging.CRITICAL
    seen = []

    class Probe:
        def level(self):
            seen.append(render_logger.level)
            return "ok"

    engine.register_object("probe", Probe())
    assert engine.fetch("string:{$probe->level}") == "ok"
    assert seen == [logging.CRITICAL]
    assert render_logger.level == logging.DEBUG

    templates.set("bad.tpl", "{call name=nope}")
    with pytest.raises(NotFoundError):
        engine.fetch("bad.tpl")
    assert render_logger.level == logging.DEBUG


def test_undefined_variable_warns_and_renders_empty(engine: Engine):
    with pytest.warns(UndefinedVariableWarning):
        assert engine.fetch("string:[{$missing}]") == "[]"


def test_mute_undefined_warnings(engine: Engine):
    engine.mute_undefined_or_null_warnings = True
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        assert engine.fetch("string:[{$missing}]") == "[]"
    assert not [w for w in caught if issubclass(w.category, UndefinedVariableWarning)]


# --------------------------- is_cached --------------------------- #

def test_is_cached_false_without_touching_storage_when_caching_off(engine: Engine, templates):
    templates.set("page.tpl", "x")
    storage = Mock(spec=MemoryCacheResource)
    engine.register_cache_resource("memory", storage)

    assert engine.is_cached("page.tpl") is False
    assert storage.method_calls == []
    assert engine.is_cached_index == {}


def test_is_cached_after_fetch(caching_engine: Engine, templates):
    templates.set("page.tpl", "cached")

    assert caching_engine.is_cached("page.tpl") is False
    caching_engine.fetch("page.tpl")
    assert caching_engine.is_cached("page.tpl") is True
    assert caching_engine.is_cached("page.tpl", cache_id="other") is False

    key = ("dict:page.tpl", None, None, int(CachingMode.CURRENT))
    assert key in caching_engine.is_cached_index


def test_is_cached_on_template_object(caching_engine: Engine, templates):
    templates.set("page.tpl", "cached")
    tpl = caching_engine.create_template("page.tpl")

    assert tpl.is_cached() is False
    tpl.fetch()
    assert tpl.is_cached() is True
