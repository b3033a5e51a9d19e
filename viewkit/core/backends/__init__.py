# viewkit/core/backends/__init__.py
"""
Template language backends.

JinjaBackend (jinja2) and MustacheBackend (chevron) both implement the
TemplateBackend protocol; get_backend() picks one by BackendKind.
"""
from viewkit.config.settings import BackendKind

from .base import CompileOptions, TemplateBackend, TemplateSet
from .jinja import JinjaBackend
from .mustache import MustacheBackend

_BACKENDS = {
    BackendKind.JINJA: JinjaBackend,
    BackendKind.MUSTACHE: MustacheBackend,
}

def get_backend(kind: BackendKind) -> TemplateBackend:
    return _BACKENDS[kind]()

__all__ = [
    "CompileOptions",
    "TemplateBackend",
    "TemplateSet",
    "JinjaBackend",
    "MustacheBackend",
    "get_backend",
]
