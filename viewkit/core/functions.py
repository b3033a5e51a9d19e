# viewkit/core/functions.py
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional
from viewkit.logging_setup import get_logger

from viewkit.exceptions import ConfigError

log = get_logger(__name__)

class FunctionTable:
    """
    Helper functions made available inside every compiled template.

    Entries merge with last-write-wins, whether they arrive one at a time or
    as a bulk mapping. Templates only see the table as it was when the
    registry was compiled: snapshot() is taken at the start of each load.
    """

    def __init__(self, functions: Optional[Mapping[str, Callable[..., Any]]] = None):
        self._lock = threading.Lock()
        self._functions: Dict[str, Callable[..., Any]] = {}
        if functions:
            self.update(functions)

    @staticmethod
    def _validate(name: str, fn: Callable[..., Any]) -> None:
        if not isinstance(name, str) or not name:
            raise ConfigError(f"function name must be a non-empty string, got {name!r}")
        if not callable(fn):
            raise ConfigError(f"function '{name}' is not callable (got {type(fn).__name__})")

    def add(self, name: str, fn: Callable[..., Any]) -> None:
        self._validate(name, fn)
        with self._lock:
            if name in self._functions:
                log.debug("template_function_replaced", name=name)
            self._functions[name] = fn

    def update(self, functions: Mapping[str, Callable[..., Any]]) -> None:
        for name, fn in functions.items():
            self._validate(name, fn)
        with self._lock:
            self._functions.update(functions)

    def snapshot(self) -> Mapping[str, Callable[..., Any]]:
        with self._lock:
            return MappingProxyType(dict(self._functions))

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)
