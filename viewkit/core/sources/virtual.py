# viewkit/core/sources/virtual.py
"""
Virtualized file sources: templates that do not live in a plain directory,
either package resources (importlib.resources) or an in-memory mapping.
"""
import importlib.resources
from importlib.resources.abc import Traversable
from typing import Dict, Iterator, Mapping, Optional, Union
from viewkit.logging_setup import get_logger

from viewkit.exceptions import DiscoveryError

log = get_logger(__name__)

class ResourceSource:
    """
    Reads templates through the importlib.resources Traversable API.

    `anchor` is either a package name ('myapp') or any Traversable, including
    a pathlib.Path or a zipfile.Path; `subdirectory` selects a folder below it.
    """

    def __init__(self, anchor: Union[str, Traversable], subdirectory: str = ""):
        self.anchor = anchor
        self.subdirectory = subdirectory.strip("/")

    def __repr__(self) -> str:
        return f"ResourceSource({self.anchor!r}, {self.subdirectory!r})"

    def _root(self) -> Traversable:
        if isinstance(self.anchor, str):
            try:
                base = importlib.resources.files(self.anchor)
            except ModuleNotFoundError as e:
                raise DiscoveryError(f"package '{self.anchor}' not found: {e}", path=self.anchor) from e
        else:
            base = self.anchor
        for part in filter(None, self.subdirectory.split("/")):
            base = base.joinpath(part)
        return base

    def walk(self) -> Iterator[str]:
        root = self._root()
        if not root.is_dir():
            raise DiscoveryError(f"resource directory '{root}' does not exist", path=str(root))

        def _walk(node: Traversable, prefix: str) -> Iterator[str]:
            try:
                children = sorted(node.iterdir(), key=lambda c: c.name)
            except OSError as e:
                raise DiscoveryError(f"failed to list resource '{node}': {e}", path=str(node)) from e
            for child in children:
                rel = f"{prefix}{child.name}"
                if child.is_dir():
                    yield from _walk(child, rel + "/")
                elif child.is_file():
                    yield rel

        yield from _walk(root, "")

    def read_file(self, path: str) -> bytes:
        node = self._root()
        for part in path.split("/"):
            node = node.joinpath(part)
        return node.read_bytes()

class MemorySource:
    """Serves templates from an in-memory mapping of relative path to text or bytes."""

    def __init__(self, files: Optional[Mapping[str, Union[str, bytes]]] = None, encoding: str = "utf-8"):
        self.encoding = encoding
        self._files: Dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.set(path, content)

    def __repr__(self) -> str:
        return f"MemorySource({len(self._files)} files)"

    def set(self, path: str, content: Union[str, bytes]) -> None:
        # adds or replaces a file; visible to the next load.
        key = path.replace("\\", "/").lstrip("/")
        self._files[key] = content.encode(self.encoding) if isinstance(content, str) else bytes(content)

    def remove(self, path: str) -> None:
        self._files.pop(path.replace("\\", "/").lstrip("/"), None)

    def walk(self) -> Iterator[str]:
        yield from sorted(self._files)

    def read_file(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError:
            raise FileNotFoundError(f"no such file in memory source: '{path}'") from None
