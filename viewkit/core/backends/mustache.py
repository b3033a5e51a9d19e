# viewkit/core/backends/mustache.py
"""
Mustache backend built on chevron.

Templates are tokenized once at load time with the configured delimiters and
rendered from the token lists. Partials ({{> partials/header}}) resolve
against the installed registry. Helper functions become mustache lambdas:
{{#upper}}{{name}}{{/upper}} calls upper() with the rendered section body.
"""
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple
import chevron
from chevron.tokenizer import tokenize
from viewkit.logging_setup import get_logger

from viewkit.exceptions import RenderError

from .base import CompileOptions

log = get_logger(__name__)

Tokens = List[Tuple[str, str]]


class _Partials(dict):
    # a partial name missing from the registry is an error, not an empty string.
    def __missing__(self, key: str):
        raise RenderError(f"partial '{key}' not found", template_name=key)


def _as_lambda(fn: Callable[..., Any]) -> Callable[[str, Callable[[str], str]], str]:
    def section(text: str, render: Callable[[str], str]) -> str:
        return str(fn(render(text)))
    section.__name__ = getattr(fn, "__name__", "section")
    return section


class _MissingKeys:
    # last lookup scope: a key that reaches it was found nowhere else.
    def __getitem__(self, key: str):
        log.warning("mustache_key_missing", key=key)
        raise KeyError(key)


class MustacheTemplateSet:
    # chevron raises ChevronError, a SyntaxError subclass, for malformed tags.
    syntax_errors = (SyntaxError,)

    def __init__(self, functions: Mapping[str, Callable[..., Any]], options: CompileOptions):
        self.left, self.right = options.delims or ("{{", "}}")
        self.warn = options.strict_undefined
        self._partials = _Partials()
        self._lambdas: Dict[str, Callable[..., str]] = {name: _as_lambda(fn) for name, fn in functions.items()}

    def parse(self, name: str, text: str) -> Tokens:
        return list(tokenize(text, def_ldel=self.left, def_rdel=self.right))

    def subtemplates(self, name: str, text: str) -> Iterable[Tuple[str, Tokens]]:
        # mustache has no named definitions inside a file.
        return ()

    def bind(self, templates: Mapping[str, Tokens]) -> None:
        self._partials = _Partials(templates)

    def execute(self, template: Tokens, data: Any, write: Callable[[str], Any], injected: Mapping[str, str]) -> None:
        # lookup order: the render data, then injected fragments, then helper lambdas.
        scopes = [data if data is not None else {}]
        if injected:
            scopes.append(dict(injected))
        scopes.append(self._lambdas)
        if self.warn:
            scopes.append(_MissingKeys())
        output = chevron.render(
            template,
            scopes[0],
            partials_dict=self._partials,
            def_ldel=self.left,
            def_rdel=self.right,
            scopes=scopes,
        )
        write(output)


class MustacheBackend:
    name = "mustache"

    def create_set(self, functions: Mapping[str, Callable[..., Any]], options: CompileOptions) -> MustacheTemplateSet:
        log.debug("mustache_template_set_created", functions=sorted(functions), delims=options.delims)
        return MustacheTemplateSet(functions, options)
