# viewkit/core/backends/base.py
"""
Contract between the registry compiler and a template language.

A backend builds one TemplateSet per load, bound to the function table
snapshot of that load. The set parses each file, reports the named
sub-templates a file declares, is told the finished name -> template mapping
(so partials and includes resolve against it) and executes templates.
"""
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Protocol, Tuple, Type


@dataclass(frozen=True)
class CompileOptions:
    delims: Optional[Tuple[str, str]] = None
    autoescape: bool = False
    strict_undefined: bool = False


class TemplateSet(Protocol):
    # exception types parse() raises for malformed template text.
    syntax_errors: Tuple[Type[BaseException], ...]

    def parse(self, name: str, text: str) -> Any: ...

    def subtemplates(self, name: str, text: str) -> Iterable[Tuple[str, Any]]: ...

    def bind(self, templates: Mapping[str, Any]) -> None: ...

    def execute(self, template: Any, data: Any, write: Callable[[str], Any], injected: Mapping[str, str]) -> None: ...


class TemplateBackend(Protocol):
    name: str

    def create_set(self, functions: Mapping[str, Callable[..., Any]], options: CompileOptions) -> TemplateSet: ...
