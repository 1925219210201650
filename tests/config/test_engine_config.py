"""
Engine configuration: YAML loading, validation, environment override.
"""

import logging
from pathlib import Path

import pytest

from tests.infrastructure import write
from tplcache import CachingMode, CompileCheck, Engine, EngineConfig, LiteralConflictError, load_config


def test_missing_file_gives_defaults(tmp_path: Path):
    cfg = load_config(tmp_path)
    assert cfg == EngineConfig()
    assert cfg.caching == CachingMode.OFF
    assert cfg.compile_check == CompileCheck.ON
    assert cfg.caching_type == "memory"


def test_load_values(tmpproj: Path):
    write(
        tmpproj / "tplcache.yaml",
        "caching: lifetime\n"
        "cache_lifetime: -1\n"
        "compile_check: compiled_filemtime\n"
        "error_reporting: warning\n"
        "mute_undefined_or_null_warnings: true\n"
        "left_delimiter: '<%'\n"
        "right_delimiter: '%>'\n"
        "literals: ['{{', '}}']\n"
        "template_dir: [templates, /abs/tpl]\n"
        "globals:\n"
        "  site: Example\n",
    )
    cfg = load_config(tmpproj)

    assert cfg.caching == CachingMode.LIFETIME
    assert cfg.cache_lifetime == -1
    assert cfg.compile_check == CompileCheck.COMPILED_FILEMTIME
    assert cfg.error_reporting == logging.WARNING
    assert cfg.mute_undefined_or_null_warnings is True
    assert (cfg.left_delimiter, cfg.right_delimiter) == ("<%", "%>")
    assert cfg.literals == ["{{", "}}"]
    assert cfg.template_dirs == [(tmpproj / "templates").resolve(), Path("/abs/tpl")]
    assert cfg.globals == {"site": "Example"}


def test_unknown_key_is_rejected(tmp_path: Path):
    write(tmp_path / "tplcache.yaml", "cachng: 1\n")
    with pytest.raises(RuntimeError, match="cachng"):
        load_config(tmp_path)


def test_bad_values_are_rejected(tmp_path: Path):
    write(tmp_path / "tplcache.yaml", "caching: sometimes\n")
    with pytest.raises(RuntimeError):
        load_config(tmp_path)

    write(tmp_path / "tplcache.yaml", "- not\n- a mapping\n")
    with pytest.raises(RuntimeError):
        load_config(tmp_path)

    write(tmp_path / "tplcache.yaml", "error_reporting: loud\n")
    with pytest.raises(RuntimeError):
        load_config(tmp_path)


def test_env_overrides_caching(tmpproj: Path, monkeypatch):
    monkeypatch.setenv("TPLCACHE_CACHING", "0")
    assert load_config(tmpproj).caching == CachingMode.OFF

    monkeypatch.setenv("TPLCACHE_CACHING", "lifetime")
    assert load_config(tmpproj).caching == CachingMode.LIFETIME

    monkeypatch.setenv("TPLCACHE_CACHING", "bogus")
    with pytest.raises(RuntimeError):
        load_config(tmpproj)


def test_engine_from_root_renders_file_templates(tmpproj: Path):
    eng = Engine.from_root(tmpproj)

    assert eng.caching == CachingMode.CURRENT
    assert eng.cache_lifetime == 600
    assert eng.fetch("page.tpl") == "Welcome to Example\n"
    assert eng.is_cached("page.tpl") is True
    assert eng.fetch("file:page.tpl") == "Welcome to Example\n"


def test_engine_from_config_applies_settings():
    cfg = EngineConfig(left_delimiter="<%", right_delimiter="%>", literals=["<%%"], globals={"g": 1})
    eng = Engine.from_config(cfg)

    assert eng.get_literals() == ["<%%"]
    assert eng.fetch("string:{x} <%$g%> <%%") == "{x} 1 <%%"


def test_config_literal_conflict():
    with pytest.raises(LiteralConflictError):
        Engine(EngineConfig(literals=["{"]))
