import io
import logging
import textwrap
from pathlib import Path

import pytest

from tplcache import CachingMode, Engine
from tplcache.resources import DictResource

# Shared helpers
from tests.infrastructure.file_utils import write


@pytest.fixture
def sink() -> io.StringIO:
    """Engine output sink (where display() ends up at the outermost level)."""
    return io.StringIO()


@pytest.fixture
def templates() -> DictResource:
    """In-memory template sources, registered as the default resource type."""
    return DictResource()


@pytest.fixture
def engine(templates: DictResource, sink: io.StringIO) -> Engine:
    eng = Engine(output=sink)
    eng.register_resource("dict", templates)
    eng.default_resource_type = "dict"
    return eng


@pytest.fixture
def caching_engine(engine: Engine) -> Engine:
    engine.set_caching(CachingMode.CURRENT)
    return engine


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Minimal project: tplcache.yaml + templates/ directory."""
    root = tmp_path
    write(
        root / "tplcache.yaml",
        textwrap.dedent("""
        caching: current
        cache_lifetime: 600
        template_dir: templates
        cache_dir: .cache
        caching_type: file
        globals:
          site: Example
        """).strip() + "\n",
    )
    write(root / "templates" / "page.tpl", "Welcome to {$site}\n")
    return root


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    # env overrides of the developer machine must not leak into tests
    monkeypatch.delenv("TPLCACHE_CACHING", raising=False)
    monkeypatch.delenv("TPLCACHE_FILE_CACHE", raising=False)


@pytest.fixture(autouse=True)
def _reset_render_logger():
    render_logger = logging.getLogger("tplcache.render")
    level = render_logger.level
    yield
    render_logger.setLevel(level)
