# viewkit/core/engine.py
"""
Contains the Engine class: the public surface for configuring, loading and
rendering a registry of view templates.
"""
import io
import os
import threading
from dataclasses import replace
from typing import Any, Callable, IO, List, Mapping, Optional, Union

from viewkit.config.settings import BackendKind, EngineConfig
from viewkit.core.backends import CompileOptions, TemplateBackend, get_backend
from viewkit.core.functions import FunctionTable
from viewkit.core.registry import TemplateRegistry, compile_exclude_spec, compile_registry
from viewkit.core.sources import DirectorySource, FileSource
from viewkit.exceptions import ConfigError, LayoutNotFoundError, RenderError, TemplateNotFoundError, ViewKitError
from viewkit.logging_setup import get_logger
from viewkit.util import sink_writer


class Engine:
    """
    Compiles the templates of a file source into a registry and renders them.

    Configure first (functions, delimiters, reload and debug flags), then call
    load(). render() reuses the compiled registry, except in reload mode,
    where every render recompiles from the source first. A registry swap is a
    single attribute assignment, so concurrent renders see either the old or
    the new registry in full.
    """

    def __init__(
        self,
        source: Union[str, os.PathLike, FileSource],
        extension: str,
        *,
        backend: Optional[Union[TemplateBackend, BackendKind, str]] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.extension = extension if extension.startswith(".") else "." + extension
        # a private copy, so engines built from one config stay independent.
        if config is None:
            config = EngineConfig(extension=self.extension)
        else:
            config = replace(config, extension=self.extension, exclude_patterns=list(config.exclude_patterns))
        self.config = config

        if isinstance(source, (str, os.PathLike)):
            self.source: FileSource = DirectorySource(source)
        elif isinstance(source, FileSource):
            self.source = source
        else:
            raise ConfigError(f"template source must be a directory path or a FileSource, got {type(source).__name__}")

        self.backend = self._resolve_backend(backend)
        self.functions = FunctionTable()
        self._lock = threading.Lock()
        self._registry: Optional[TemplateRegistry] = None
        # bumped by every change that compiled templates depend on.
        self._generation = 0
        self._loaded_generation = 0
        self._exclude_spec = compile_exclude_spec(config.exclude_patterns)
        self.log = get_logger(__name__)

    @classmethod
    def from_config(cls, config: EngineConfig) -> "Engine":
        return cls(config.directory, config.extension, backend=config.backend, config=config)

    def _resolve_backend(self, backend: Optional[Union[TemplateBackend, BackendKind, str]]) -> TemplateBackend:
        if backend is None:
            backend = self.config.backend or BackendKind.for_extension(self.extension)
        if isinstance(backend, str):
            kind = BackendKind.from_string(backend)
            if kind is None:
                raise ConfigError(f"unknown template backend '{backend}'")
            backend = kind
        if isinstance(backend, BackendKind):
            return get_backend(backend)
        return backend

    def __repr__(self) -> str:
        return f"Engine({self.source!r}, {self.extension!r}, backend={self.backend.name!r})"

    # configuration

    def enable_reload(self, enabled: bool = True) -> "Engine":
        # when enabled, every render recompiles the registry first.
        self.config.reload = enabled
        return self

    def enable_debug(self, enabled: bool = True) -> "Engine":
        # when enabled, every compiled template name is logged at info level.
        self.config.debug = enabled
        return self

    def set_delims(self, left: str, right: str) -> "Engine":
        if not left or not right:
            raise ConfigError("template delimiters must be non-empty strings")
        with self._lock:
            self.config.delims = (left, right)
            self._generation += 1
        return self

    def set_layout_key(self, key: str) -> "Engine":
        # the name a layout uses to reach the rendered inner template.
        if not key:
            raise ConfigError("layout key must be a non-empty string")
        self.config.layout_key = key
        return self

    @property
    def reload_enabled(self) -> bool:
        return self.config.reload

    @property
    def debug_enabled(self) -> bool:
        return self.config.debug

    # function table

    def add_func(self, name: str, fn: Callable[..., Any]) -> "Engine":
        self.functions.add(name, fn)
        self._mark_stale()
        return self

    def add_func_map(self, functions: Mapping[str, Callable[..., Any]]) -> "Engine":
        self.functions.update(functions)
        self._mark_stale()
        return self

    def func_map(self) -> Mapping[str, Callable[..., Any]]:
        return self.functions.snapshot()

    def _mark_stale(self) -> None:
        # compiled templates keep their old table until the next load.
        with self._lock:
            self._generation += 1
            if self._registry is not None:
                self.log.debug("registry_marked_stale", generation=self._generation)

    # loading

    @property
    def is_loaded(self) -> bool:
        return self._registry is not None

    @property
    def registry(self) -> Optional[TemplateRegistry]:
        return self._registry

    def names(self) -> List[str]:
        registry = self._registry
        return registry.names() if registry is not None else []

    def load(self) -> TemplateRegistry:
        """
        Compiles every template of the source and installs the result.

        The previous registry stays active if anything fails.
        """
        with self._lock:
            generation = self._generation
            functions = self.functions.snapshot()
            options = CompileOptions(
                delims=self.config.delims,
                autoescape=self.config.resolved_autoescape,
                strict_undefined=self.config.strict_undefined,
            )

        template_set = self.backend.create_set(functions, options)
        registry = compile_registry(
            self.source,
            self.extension,
            template_set,
            exclude=self._exclude_spec,
            encoding=self.config.encoding,
            debug=self.config.debug,
        )

        with self._lock:
            self._registry = registry
            self._loaded_generation = generation
        self.log.info("registry_loaded", templates=len(registry), backend=self.backend.name)
        return registry

    def _active_registry(self) -> TemplateRegistry:
        registry = self._registry
        if registry is None or self._loaded_generation != self._generation or self.config.reload:
            registry = self.load()
        return registry

    # rendering

    def render(self, sink: IO[Any], name: str, data: Any = None, layout: Optional[str] = None) -> None:
        """
        Renders template `name` with `data` into `sink`.

        With a layout, the inner template renders into a buffer first and the
        layout receives that text, unescaped, under the layout key. Lookup
        failures write nothing; an execution failure may leave the bytes
        already written in the sink.
        """
        registry = self._active_registry()

        entry = registry.lookup(name)
        if entry is None:
            self.log.warning("template_not_found", name=name)
            raise TemplateNotFoundError(name)

        layout_entry = None
        if layout:
            layout_entry = registry.lookup(layout)
            if layout_entry is None:
                self.log.warning("layout_not_found", name=layout, template=name)
                raise LayoutNotFoundError(layout)

        write = sink_writer(sink, self.config.encoding)
        if layout_entry is None:
            self._execute(registry, entry.name, entry.template, data, write, {})
            return

        inner = io.StringIO()
        self._execute(registry, entry.name, entry.template, data, inner.write, {})
        self._execute(registry, layout_entry.name, layout_entry.template, data, write, {self.config.layout_key: inner.getvalue()})

    def render_to_string(self, name: str, data: Any = None, layout: Optional[str] = None) -> str:
        buffer = io.StringIO()
        self.render(buffer, name, data, layout)
        return buffer.getvalue()

    def _execute(self, registry: TemplateRegistry, name: str, template: Any, data: Any, write: Callable[[str], Any], injected: Mapping[str, str]) -> None:
        try:
            registry.template_set.execute(template, data, write, injected)
        except ViewKitError:
            raise
        except Exception as e:
            self.log.error("template_render_failed", name=name, error_type=type(e).__name__, error=str(e))
            raise RenderError(f"template '{name}' failed to render: {e}", template_name=name) from e
        self.log.debug("template_rendered", name=name)
