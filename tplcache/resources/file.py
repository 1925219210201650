from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Optional, Union

from .base import Resource, Source
from ..errors import NotFoundError

if TYPE_CHECKING:
    from ..engine import Engine

logger = logging.getLogger(__name__)


class FileResource(Resource):
    """
    Templates read from one or more template directories.

    Directories are searched in order. Absolute names bypass the search.
    When nothing is found, the engine's default template handler (if any)
    is asked for the content.
    """

    def __init__(self, template_dirs: Union[str, Path, Iterable[Union[str, Path]], None] = None):
        if template_dirs is None:
            template_dirs = [Path.cwd() / "templates"]
        elif isinstance(template_dirs, (str, Path)):
            template_dirs = [template_dirs]
        self.template_dirs: List[Path] = [Path(d) for d in template_dirs]

    def _find(self, name: str) -> Optional[Path]:
        candidate = Path(name)
        if candidate.is_absolute():
            return candidate if candidate.is_file() else None
        for base in self.template_dirs:
            path = base / name
            if path.is_file():
                return path
        return None

    def load(self, name: str, engine: Engine) -> Source:
        path = self._find(name)
        if path is not None:
            st = path.stat()
            return Source(
                resource=f"file:{name}",
                name=name,
                content=path.read_text(encoding="utf-8"),
                timestamp=st.st_mtime,
            )

        handler = engine.default_template_handler
        if handler is not None:
            content = handler("file", name)
            if isinstance(content, Path):
                content = content.read_text(encoding="utf-8")
            if content is not None:
                logger.debug(f"Default template handler supplied 'file:{name}'")
                return Source(resource=f"file:{name}", name=name, content=str(content), timestamp=0.0)

        dirs = ", ".join(str(d) for d in self.template_dirs)
        raise NotFoundError(f"Unable to load template 'file:{name}' (searched: {dirs})")

    def timestamp(self, name: str, engine: Engine) -> Optional[float]:
        path = self._find(name)
        if path is None:
            # served by the default template handler, if at all
            return 0.0 if engine.default_template_handler is not None else None
        return path.stat().st_mtime


__all__ = ["FileResource"]
