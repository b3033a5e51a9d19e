# viewkit/core/registry.py
"""
Compiles every template a FileSource holds into an immutable TemplateRegistry.

A registry is built from scratch on each load and only handed back when every
file compiled, so a failed load never disturbs the registry already in use.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
import pathspec
from viewkit.logging_setup import get_logger

from viewkit.core.backends.base import TemplateSet
from viewkit.core.naming import resolve_name
from viewkit.core.sources.base import FileSource
from viewkit.exceptions import CompileError, DiscoveryError, ViewKitError
from viewkit.util import strip_utf8_bom

log = get_logger(__name__)


@dataclass(frozen=True)
class CompiledTemplate:
    name: str
    template: Any
    path: Optional[str] = None
    # set for sub-templates declared inside another file.
    parent: Optional[str] = None


class TemplateRegistry:
    """Read-only name -> CompiledTemplate mapping plus the TemplateSet that runs it."""

    def __init__(self, entries: Mapping[str, CompiledTemplate], template_set: TemplateSet):
        self._entries = MappingProxyType(dict(entries))
        self.template_set = template_set

    def lookup(self, name: str) -> Optional[CompiledTemplate]:
        return self._entries.get(name)

    def names(self) -> List[str]:
        return sorted(self._entries)

    @property
    def entries(self) -> Mapping[str, CompiledTemplate]:
        return self._entries

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


def compile_exclude_spec(patterns: List[str]) -> Optional[pathspec.PathSpec]:
    # compiles gitignore-style patterns used to leave files out of the registry.
    if not patterns:
        return None
    try:
        return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, patterns)
    except (ValueError, TypeError) as e:
        raise DiscoveryError(f"error compiling exclude patterns {patterns}: {e}") from e


def discover_template_paths(source: FileSource, suffix: str, exclude: Optional[pathspec.PathSpec] = None) -> List[str]:
    """Lists the template files of a source in compile order (lexicographic by relative path)."""
    try:
        paths = [p for p in source.walk() if p.endswith(suffix)]
    except ViewKitError:
        raise
    except OSError as e:
        raise DiscoveryError(f"failed to enumerate templates in {source!r}: {e}") from e

    if exclude is not None:
        kept = [p for p in paths if not exclude.match_file(p)]
        if len(kept) != len(paths):
            log.debug("template_files_excluded", count=len(paths) - len(kept))
        paths = kept
    return sorted(paths)


def _read_template_text(source: FileSource, path: str, name: str, encoding: str) -> str:
    try:
        raw = source.read_file(path)
    except OSError as e:
        raise DiscoveryError(f"failed to read template file '{path}': {e}", path=path) from e
    try:
        return strip_utf8_bom(raw).decode(encoding)
    except UnicodeDecodeError as e:
        raise CompileError(f"template '{name}' ({path}) is not valid {encoding}: {e}", template_name=name, path=path) from e


def compile_registry(
    source: FileSource,
    suffix: str,
    template_set: TemplateSet,
    *,
    exclude: Optional[pathspec.PathSpec] = None,
    encoding: str = "utf-8",
    debug: bool = False,
) -> TemplateRegistry:
    """
    Walks, reads and parses every template file and returns the new registry.

    Name collisions between files are resolved last-wins in compile order.
    Sub-templates (named definitions inside a file) are registered under their
    own names unless a file already claims that name. Any failure raises and
    no registry is produced.
    """
    log.info("registry_compile_started", source=repr(source), suffix=suffix)
    entries: Dict[str, CompiledTemplate] = {}
    declared: List[Tuple[str, CompiledTemplate]] = []
    emit = log.info if debug else log.debug

    for path in discover_template_paths(source, suffix, exclude):
        try:
            name = resolve_name(path, suffix)
        except ValueError as e:
            log.warning("template_file_skipped", path=path, reason=str(e))
            continue

        text = _read_template_text(source, path, name, encoding)
        try:
            compiled = template_set.parse(name, text)
            subtemplates = list(template_set.subtemplates(name, text))
        except template_set.syntax_errors as e:
            log.error("template_compilation_failed", name=name, path=path, error=str(e))
            raise CompileError(f"failed to compile template '{name}' ({path}): {e}", template_name=name, path=path) from e

        if name in entries:
            log.warning("template_name_collision", name=name, previous=entries[name].path, replacement=path)
        entries[name] = CompiledTemplate(name=name, template=compiled, path=path)
        emit("template_compiled", name=name, path=path)

        for sub_name, sub_template in subtemplates:
            declared.append((sub_name, CompiledTemplate(name=sub_name, template=sub_template, path=path, parent=name)))

    file_names = set(entries)
    for sub_name, entry in declared:
        if sub_name in file_names:
            log.debug("subtemplate_shadowed_by_file", name=sub_name, parent=entry.parent)
            continue
        entries[sub_name] = entry
        emit("subtemplate_compiled", name=sub_name, parent=entry.parent)

    template_set.bind({name: entry.template for name, entry in entries.items()})
    log.info("registry_compiled", templates=len(entries))
    return TemplateRegistry(entries, template_set)
