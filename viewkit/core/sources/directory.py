# viewkit/core/sources/directory.py
import os
from pathlib import Path
from typing import Iterator, Union
from viewkit.logging_setup import get_logger

from viewkit.exceptions import DiscoveryError

log = get_logger(__name__)

class DirectorySource:
    """Reads templates straight from a directory on disk."""

    def __init__(self, root: Union[str, os.PathLike], follow_symlinks: bool = False):
        self.root = Path(root)
        self.follow_symlinks = follow_symlinks

    def __repr__(self) -> str:
        return f"DirectorySource({str(self.root)!r})"

    def walk(self) -> Iterator[str]:
        if not self.root.is_dir():
            raise DiscoveryError(f"template directory '{self.root}' does not exist or is not a directory", path=str(self.root))

        log.debug("directory_walk_started", root=str(self.root))

        def _raise_walk_error(err: OSError):
            raise DiscoveryError(f"failed to list '{err.filename}': {err.strerror or err}", path=err.filename) from err

        for root, dirs, files in os.walk(str(self.root), topdown=True, onerror=_raise_walk_error, followlinks=self.follow_symlinks):
            dirs.sort()
            for file_name in sorted(files):
                yield Path(root, file_name).relative_to(self.root).as_posix()

    def read_file(self, path: str) -> bytes:
        return (self.root / path).read_bytes()
