# viewkit/__init__.py
"""
viewkit: compile a directory of view templates into a named registry and
render them, optionally wrapped in a layout, with injectable helper functions.
"""
__version__ = "0.3.0"

from viewkit.core.engine import Engine
from viewkit.core.sources import DirectorySource, MemorySource, ResourceSource, FileSource
from viewkit.exceptions import (
    ViewKitError,
    ConfigError,
    DiscoveryError,
    CompileError,
    TemplateNotFoundError,
    LayoutNotFoundError,
    RenderError,
)

__all__ = [
    "Engine",
    "FileSource",
    "DirectorySource",
    "MemorySource",
    "ResourceSource",
    "ViewKitError",
    "ConfigError",
    "DiscoveryError",
    "CompileError",
    "TemplateNotFoundError",
    "LayoutNotFoundError",
    "RenderError",
    "__version__",
]
