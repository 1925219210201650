from __future__ import annotations

import hashlib
import json
import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional

from .base import CacheResource
from .model import CachedArtifact, id_matches
from ..types import TemplateId
from ..version import tool_version as _installed_version

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


def _sha1_json(payload: dict) -> str:
    return hashlib.sha1(json.dumps(payload, ensure_ascii=False, sort_keys=True).encode("utf-8")).hexdigest()


def _ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


class FileCacheResource(CacheResource):
    """
    File cache of rendered templates:
      • one JSON document per (resource, cache_id, compile_id)
      • keys are laid out in sub-directories by sha1 prefix
      • reads are best-effort: a broken file is a cache miss
    Nocache snapshot values must be JSON serializable.
    """

    def __init__(self, cache_dir: Path | str, *, enabled: Optional[bool] = None, tool_version: Optional[str] = None):
        self.tool_version = tool_version or _installed_version()
        env = os.environ.get("TPLCACHE_FILE_CACHE", None)
        if env is not None:
            self.enabled = env.strip().lower() not in {"0", "false", "no", "off", ""}
        elif enabled is not None:
            self.enabled = bool(enabled)
        else:
            self.enabled = True
        self.dir = Path(cache_dir)
        if self.enabled:
            try:
                _ensure_dir(self.dir)
            except OSError:
                logger.warning(f"Cache directory {self.dir} is not writable, file cache disabled")
                self.enabled = False

    # --------------------------- keys --------------------------- #

    def _key(self, template_id: TemplateId) -> str:
        return _sha1_json({
            "v": CACHE_VERSION,
            "tool": self.tool_version,
            "resource": template_id.resource,
            "cache_id": template_id.cache_id,
            "compile_id": template_id.compile_id,
        })

    def _bucket_path(self, key: str) -> Path:
        d = self.dir / key[:2] / key[2:4]
        return d / f"{key}.json"

    # --------------------------- CacheResource --------------------------- #

    def _read(self, template_id: TemplateId) -> Optional[CachedArtifact]:
        data = self._load_json(self._bucket_path(self._key(template_id)))
        if not data or data.get("v") != CACHE_VERSION:
            return None
        try:
            return CachedArtifact.from_dict(data)
        except (TypeError, ValueError):
            return None

    def _store(self, artifact: CachedArtifact) -> None:
        payload = artifact.to_dict()
        payload["v"] = CACHE_VERSION
        self._atom_write(self._bucket_path(self._key(artifact.template_id)), payload)

    def delete(self, resource: Optional[str] = None, cache_id: Optional[str] = None,
               compile_id: Optional[str] = None) -> int:
        deleted = 0
        for path in self._iter_files():
            data = self._load_json(path)
            if data is None:
                continue
            try:
                artifact = CachedArtifact.from_dict(data)
            except (TypeError, ValueError):
                continue
            if id_matches(artifact.template_id, resource, cache_id, compile_id):
                try:
                    path.unlink()
                    deleted += 1
                except OSError:
                    pass
        return deleted

    # --------------------------- IO helpers --------------------------- #

    def _iter_files(self) -> List[Path]:
        if not self.dir.exists():
            return []
        return sorted(self.dir.rglob("*.json"))

    def _load_json(self, path: Path) -> Optional[dict]:
        if not self.enabled:
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            return None

    def _atom_write(self, path: Path, data: dict) -> None:
        if not self.enabled:
            return
        _ensure_dir(path.parent)
        tmp = path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        tmp.replace(path)

    # --------------------------- MAINTENANCE --------------------------- #

    def purge_all(self) -> bool:
        """Removes the whole cache directory content."""
        try:
            if self.dir.exists():
                shutil.rmtree(self.dir, ignore_errors=True)
            self.dir.mkdir(parents=True, exist_ok=True)
            return True
        except OSError:
            return False


__all__ = ["FileCacheResource"]
