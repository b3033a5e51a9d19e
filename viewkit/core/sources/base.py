from typing import Iterator, Protocol, runtime_checkable


@runtime_checkable
class FileSource(Protocol):
    """Enumerates and reads template files below a fixed root."""

    def walk(self) -> Iterator[str]:
        """Yield the path of every file below the root, relative to it, '/'-separated."""
        ...

    def read_file(self, path: str) -> bytes:
        """Return the contents of a path yielded by walk(); raise OSError on failure."""
        ...
