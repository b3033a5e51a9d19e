# viewkit/core/sources/__init__.py
"""
File sources the registry compiler reads templates from.

Every source satisfies the FileSource protocol: walk() lists relative POSIX
paths of all files below the source root, and read_file() returns the bytes
of one of them. The variants share no base class.
"""
from .base import FileSource
from .directory import DirectorySource
from .virtual import MemorySource, ResourceSource

__all__ = ["FileSource", "DirectorySource", "MemorySource", "ResourceSource"]
