import io
import logging
import pytest
from pathlib import Path
from viewkit import Engine, MemorySource
from viewkit.config.settings import EngineConfig
from viewkit.core.backends import MustacheBackend
from viewkit.exceptions import LayoutNotFoundError, RenderError, TemplateNotFoundError

FULL_PAGE = (
    "<!DOCTYPE html><html><head><title>Main</title></head>"
    "<body><h2>Header</h2><h1>Hello, World!</h1><h2>Footer</h2></body></html>"
)

@pytest.fixture
def engine(mustache_views: Path) -> Engine:
    engine = Engine(mustache_views, ".mustache")
    engine.add_func_map({"lower": str.lower, "upper": str.upper})
    engine.load()
    return engine

def test_extension_selects_mustache_backend(engine: Engine):
    assert isinstance(engine.backend, MustacheBackend)

def test_render_with_partials(engine: Engine, trim):
    result = engine.render_to_string("index", {"Title": "Hello, World!"})
    assert trim(result) == "<h2>Header</h2><h1>Hello, World!</h1><h2>Footer</h2>"

def test_render_nested_name(engine: Engine, trim):
    assert trim(engine.render_to_string("errors/404", {"Error": "404 Not Found!"})) == "<h1>404 Not Found!</h1>"

def test_layout_composition(engine: Engine, trim):
    sink = io.StringIO()
    engine.render(sink, "index", {"Title": "Hello, World!"}, "layouts/main")
    assert trim(sink.getvalue()) == FULL_PAGE

def test_empty_layout(engine: Engine, trim):
    assert trim(engine.render_to_string("index", {"Title": "Hello, World!"}, "")) == (
        "<h2>Header</h2><h1>Hello, World!</h1><h2>Footer</h2>"
    )

def test_functions_apply_to_section_bodies(engine: Engine, trim):
    result = engine.render_to_string("func_map", {"Var1": "LOwEr", "Var2": "upPEr"})
    assert trim(result) == "<h2>lower</h2><p>UPPER</p>"
    assert {"lower", "upper"} <= set(engine.func_map())

def test_data_is_escaped(engine: Engine, trim):
    assert trim(engine.render_to_string("errors/404", {"Error": "<b>"})) == "<h1>&lt;b&gt;</h1>"

def test_missing_template_and_layout(engine: Engine):
    sink = io.StringIO()
    with pytest.raises(TemplateNotFoundError):
        engine.render(sink, "nope", {})
    with pytest.raises(LayoutNotFoundError):
        engine.render(sink, "index", {}, "layouts/nope")
    assert sink.getvalue() == ""

def test_missing_partial_is_a_render_error():
    engine = Engine(MemorySource({"page.mustache": "<p>{{> partials/absent}}</p>"}), ".mustache")
    with pytest.raises(RenderError) as exc_info:
        engine.render_to_string("page", {})
    assert exc_info.value.template_name == "partials/absent"

def test_custom_delimiters():
    engine = Engine(MemorySource({"page.mustache": "<p><% name %></p>"}), ".mustache").set_delims("<%", "%>")
    assert engine.render_to_string("page", {"name": "x"}) == "<p>x</p>"

def test_reload_mode_with_memory_source():
    source = MemorySource({"reload.mustache": "before reload"})
    engine = Engine(source, ".mustache").enable_reload()
    assert engine.render_to_string("reload") == "before reload"
    source.set("reload.mustache", "after reload")
    assert engine.render_to_string("reload") == "after reload"

def test_backend_can_be_forced_for_any_extension():
    engine = Engine(MemorySource({"page.html": "<p>{{name}}</p>{{#items}}<i>{{.}}</i>{{/items}}"}), ".html", backend="mustache")
    assert engine.render_to_string("page", {"name": "n", "items": [1, 2]}) == "<p>n</p><i>1</i><i>2</i>"

def test_missing_keys_are_logged_when_strict(caplog, capsys):
    caplog.set_level(logging.WARNING, logger="viewkit")
    source = MemorySource({"page.mustache": "<p>{{name}}{{missing}}</p>"})
    engine = Engine(source, ".mustache", config=EngineConfig(strict_undefined=True))
    assert engine.render_to_string("page", {"name": "n"}) == "<p>n</p>"
    assert any("mustache_key_missing" in record.getMessage() for record in caplog.records)
    assert capsys.readouterr().err == ""

def test_object_data_and_injected_layout_share_scopes():
    class Page:
        def __init__(self):
            self.Title = "from object"

    source = MemorySource({"inner.mustache": "<h1>{{Title}}</h1>", "outer.mustache": "<title>{{Title}}</title>{{{yield}}}"})
    engine = Engine(source, ".mustache")
    assert engine.render_to_string("inner", Page(), "outer") == "<title>from object</title><h1>from object</h1>"
