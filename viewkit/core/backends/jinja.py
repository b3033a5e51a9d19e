# viewkit/core/backends/jinja.py
"""
Jinja2 backend.

Each load gets its own Environment whose loader serves templates out of the
registry being installed, so {% include %}, {% import %} and {% extends %}
reference logical names ('partials/header') and never touch the disk.
"""
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple
from jinja2 import BaseLoader, Environment, StrictUndefined, Template, TemplateNotFound, TemplateSyntaxError, Undefined, nodes
from markupsafe import Markup
from viewkit.logging_setup import get_logger

from .base import CompileOptions

log = get_logger(__name__)

_DEFINITION_NODES = (nodes.Macro, nodes.Import, nodes.FromImport, nodes.Assign, nodes.AssignBlock)


class _RegistryLoader(BaseLoader):
    """Hands out already-compiled templates by logical name."""

    def __init__(self):
        self.templates: Dict[str, Template] = {}

    def get_source(self, environment: Environment, template: str):
        # sources are never re-read; everything is compiled up front.
        raise TemplateNotFound(template)

    def load(self, environment: Environment, name: str, globals: Optional[Mapping[str, Any]] = None) -> Template:
        try:
            template = self.templates[name]
        except KeyError:
            raise TemplateNotFound(name) from None
        return template

    def list_templates(self):
        return sorted(self.templates)


def _context_vars(data: Any) -> Dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    if hasattr(data, "__dict__"):
        return dict(vars(data))
    raise TypeError(f"render data must be a mapping or an object with attributes, got {type(data).__name__}")


class JinjaTemplateSet:
    syntax_errors = (TemplateSyntaxError,)

    def __init__(self, functions: Mapping[str, Callable[..., Any]], options: CompileOptions):
        self._loader = _RegistryLoader()
        delimiter_kwargs = {}
        if options.delims:
            delimiter_kwargs["variable_start_string"], delimiter_kwargs["variable_end_string"] = options.delims
        self.environment = Environment(
            loader=self._loader,
            autoescape=options.autoescape,
            undefined=StrictUndefined if options.strict_undefined else Undefined,
            cache_size=0,
            auto_reload=False,
            keep_trailing_newline=True,
            **delimiter_kwargs,
        )
        # helpers are callable both as {{ fn(x) }} and as {{ x | fn }}.
        self.environment.globals.update(functions)
        self.environment.filters.update(functions)

    def _from_source(self, source: Any, name: str) -> Template:
        code = self.environment.compile(source, name=name, filename=name)
        return self.environment.template_class.from_code(self.environment, code, self.environment.make_globals(None), None)

    def parse(self, name: str, text: str) -> Template:
        return self._from_source(text, name)

    def subtemplates(self, name: str, text: str) -> Iterable[Tuple[str, Template]]:
        block_names = [block.name for block in self.environment.parse(text, name=name).find_all(nodes.Block)]
        for block_name in block_names:
            # a fresh tree per block, since compiled node trees are not shared.
            tree = self.environment.parse(text, name=name)
            block = next(b for b in tree.find_all(nodes.Block) if b.name == block_name)
            # top-level macros, imports and sets of the file run ahead of the block body.
            definitions = [node for node in tree.body if isinstance(node, _DEFINITION_NODES)]
            body = nodes.Template(definitions + block.body, lineno=block.lineno).set_environment(self.environment)
            yield block_name, self._from_source(body, f"{name}#{block_name}")

    def bind(self, templates: Mapping[str, Template]) -> None:
        self._loader.templates = dict(templates)

    def execute(self, template: Template, data: Any, write: Callable[[str], Any], injected: Mapping[str, str]) -> None:
        context = _context_vars(data)
        for key, fragment in injected.items():
            context[key] = Markup(fragment)
        for chunk in template.generate(context):
            write(chunk)


class JinjaBackend:
    name = "jinja"

    def create_set(self, functions: Mapping[str, Callable[..., Any]], options: CompileOptions) -> JinjaTemplateSet:
        log.debug("jinja_template_set_created", functions=sorted(functions), autoescape=options.autoescape, delims=options.delims)
        return JinjaTemplateSet(functions, options)
