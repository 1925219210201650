from .base import Resource, Source, split_resource_ref
from .file import FileResource
from .memory import DictResource
from .string import StringResource

__all__ = ["Resource", "Source", "split_resource_ref", "FileResource", "DictResource", "StringResource"]
