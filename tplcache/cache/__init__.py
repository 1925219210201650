from .base import CacheResource
from .file import FileCacheResource
from .handle import CachedHandle
from .memory import MemoryCacheResource
from .model import CachedArtifact, SEGMENT_INCLUDE, SEGMENT_NOCACHE, SEGMENT_TEXT

__all__ = [
    "CacheResource",
    "CachedArtifact",
    "CachedHandle",
    "FileCacheResource",
    "MemoryCacheResource",
    "SEGMENT_INCLUDE",
    "SEGMENT_NOCACHE",
    "SEGMENT_TEXT",
]
