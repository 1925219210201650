"""
Tag compiler: nocache region wrapping and the {make_nocache} hook.
"""

import pytest

from tplcache.compile import Lexer, TemplateCompiler, create_default_tags
from tplcache.compile.ops import AssignOp, CallOp, IncludeOp, Literal, MakeNocacheOp, NocacheOp, TextOp, VarOutputOp, VarRef
from tplcache.errors import CompilerError


def compile_src(source, caching=False, template=None):
    compiler = TemplateCompiler(create_default_tags(), Lexer(), template=template, caching=caching, name="t")
    return compiler.compile(source)


class TestMakeNocache:
    def test_no_op_without_caching(self):
        compiled = compile_src("{make_nocache $x}")
        assert compiled.ops == []
        assert compiled.has_nocache_code is False

    def test_emits_snapshot_call_when_caching(self):
        compiled = compile_src("{make_nocache $x}", caching=True)
        assert compiled.ops == [MakeNocacheOp("x")]
        assert compiled.has_nocache_code is True
        # the call itself is never wrapped into a nocache region
        assert compiled.nocache_regions == {}

    def test_named_attribute(self):
        compiled = compile_src('{make_nocache var="x"}', caching=True)
        assert compiled.ops == [MakeNocacheOp("x")]

    def test_not_wrapped_inside_nocache_flagged_context(self):
        compiled = compile_src("{make_nocache $x}{$x nocache}", caching=True)
        assert compiled.ops[0] == MakeNocacheOp("x")
        assert isinstance(compiled.ops[1], NocacheOp)

    def test_requires_variable(self):
        with pytest.raises(CompilerError):
            compile_src("{make_nocache}", caching=True)
        with pytest.raises(CompilerError):
            compile_src('{make_nocache "not a name"}', caching=True)

    def test_rejects_nocache_flag(self):
        with pytest.raises(CompilerError):
            compile_src("{make_nocache $x nocache}", caching=True)


class TestNocacheRegions:
    def test_flagged_variable_becomes_region_when_caching(self):
        compiled = compile_src("a{$x nocache}b", caching=True)
        assert compiled.ops[0] == TextOp("a")
        region = compiled.ops[1]
        assert isinstance(region, NocacheOp)
        assert region.body == [VarOutputOp("x")]
        assert compiled.nocache_regions[region.region_id] is region
        assert compiled.ops[2] == TextOp("b")

    def test_flag_is_ignored_without_caching(self):
        compiled = compile_src("{$x nocache}")
        assert compiled.ops == [VarOutputOp("x")]
        assert compiled.has_nocache_code is False

    def test_nocache_block(self):
        compiled = compile_src("{nocache}[{$x}]{/nocache}", caching=True)
        assert len(compiled.ops) == 1
        region = compiled.ops[0]
        assert region.body == [TextOp("["), VarOutputOp("x"), TextOp("]")]

    def test_nested_regions_collapse(self):
        compiled = compile_src("{nocache}{nocache}{$x}{/nocache}{$y nocache}{/nocache}", caching=True)
        assert len(compiled.nocache_regions) == 1
        assert compiled.ops[0].body == [VarOutputOp("x"), VarOutputOp("y")]

    def test_variable_assigned_nocache(self, engine, templates):
        templates.set("page.tpl", "{$live}{$plain}")
        engine.assign("live", 1, nocache=True)
        engine.assign("plain", 2)
        tpl = engine.create_template("page.tpl")

        compiled = compile_src("{$live}{$plain}", caching=True, template=tpl)
        assert isinstance(compiled.ops[0], NocacheOp)
        assert compiled.ops[1] == VarOutputOp("plain")

    def test_regions_inside_functions_are_indexed(self):
        compiled = compile_src("{function name=f}{$x nocache}{/function}", caching=True)
        func = compiled.functions["f"]
        assert isinstance(func.body[0], NocacheOp)
        assert func.body[0].region_id in compiled.nocache_regions
        assert func.resource == "t"


class TestTags:
    def test_assign(self):
        compiled = compile_src("{assign var=x value=3}{assign y $x}")
        assert compiled.ops == [AssignOp("x", Literal(3)), AssignOp("y", VarRef("x"))]

    def test_assign_nocache_flag(self):
        compiled = compile_src('{assign var=x value="a" nocache}')
        assert compiled.ops == [AssignOp("x", Literal("a"), nocache=True)]

    def test_include_and_call(self):
        compiled = compile_src('{include file="b.tpl"}{call f}')
        assert compiled.ops == [IncludeOp(Literal("b.tpl")), CallOp(Literal("f"))]

    @pytest.mark.parametrize("source", [
        "{unknown}",
        "{assign var=x}",
        "{assign var=x value=1 extra=2}",
        "{include}",
        "{nocache}open",
        "{/nocache}",
        "{function name=f}{/nocache}",
        "{function name=f}a{/function}{function name=f}b{/function}",
        "{$}",
    ])
    def test_syntax_errors(self, source):
        with pytest.raises(CompilerError):
            compile_src(source)

    def test_error_reports_line(self):
        with pytest.raises(CompilerError) as exc:
            compile_src("ok\nok\n{bogus}")
        assert exc.value.line == 3
        assert exc.value.template_name == "t"
