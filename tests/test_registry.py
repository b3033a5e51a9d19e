import pytest
from viewkit.core.backends import CompileOptions, JinjaBackend, MustacheBackend
from viewkit.core.registry import compile_exclude_spec, compile_registry, discover_template_paths
from viewkit.core.sources import MemorySource
from viewkit.exceptions import CompileError, DiscoveryError

def _jinja_set(functions=None):
    return JinjaBackend().create_set(functions or {}, CompileOptions(autoescape=True))

def test_compiles_every_matching_file_under_its_logical_name():
    source = MemorySource({
        "index.html": "<h1>{{ Title }}</h1>",
        "errors/404.html": "<h1>{{ Error }}</h1>",
        "layouts/main.html": "<body>{{ yield }}</body>",
        "README.md": "not a template",
    })
    registry = compile_registry(source, ".html", _jinja_set())
    assert registry.names() == ["errors/404", "index", "layouts/main"]
    entry = registry.lookup("errors/404")
    assert entry.path == "errors/404.html"
    assert entry.parent is None
    assert "README" not in registry

def test_discovery_order_is_lexicographic():
    source = MemorySource({"b.html": "", "a/z.html": "", "a.html": ""})
    assert discover_template_paths(source, ".html") == ["a.html", "a/z.html", "b.html"]

def test_exclude_patterns_skip_files():
    source = MemorySource({"index.html": "", "drafts/wip.html": "", "drafts/keep.html": ""})
    spec = compile_exclude_spec(["drafts/*", "!drafts/keep.html"])
    assert discover_template_paths(source, ".html", spec) == ["drafts/keep.html", "index.html"]

def test_name_collision_serves_the_later_file():
    source = MemorySource({"./dup.html": "first", "dup.html": "second"})
    registry = compile_registry(source, ".html", _jinja_set())
    assert registry.names() == ["dup"]
    assert registry.lookup("dup").path == "dup.html"

def test_syntax_error_aborts_with_the_offending_name():
    source = MemorySource({"good.html": "ok", "pages/broken.html": "{% if %}"})
    with pytest.raises(CompileError) as exc_info:
        compile_registry(source, ".html", _jinja_set())
    assert exc_info.value.template_name == "pages/broken"
    assert exc_info.value.path == "pages/broken.html"
    assert "pages/broken" in str(exc_info.value)

def test_invalid_encoding_is_a_compile_error():
    source = MemorySource({"latin.html": b"caf\xe9"})
    with pytest.raises(CompileError):
        compile_registry(source, ".html", _jinja_set())

def test_utf8_bom_is_stripped():
    source = MemorySource({"bom.html": b"\xef\xbb\xbfhello"})
    registry = compile_registry(source, ".html", _jinja_set())
    chunks = []
    registry.template_set.execute(registry.lookup("bom").template, {}, chunks.append, {})
    assert "".join(chunks) == "hello"

def test_read_failure_is_a_discovery_error():
    class FlakySource(MemorySource):
        def read_file(self, path):
            raise PermissionError(13, "Permission denied", path)

    with pytest.raises(DiscoveryError) as exc_info:
        compile_registry(FlakySource({"index.html": "x"}), ".html", _jinja_set())
    assert exc_info.value.path == "index.html"

def test_jinja_blocks_register_as_subtemplates():
    source = MemorySource({
        "components.html": '{% block card %}<div class="card">{{ Title }}</div>{% endblock %}'
                           "{% block badge %}<span>{{ Label }}</span>{% endblock %}",
        "badge.html": "<em>file wins</em>",
    })
    registry = compile_registry(source, ".html", _jinja_set())
    assert set(registry.names()) == {"components", "card", "badge"}
    card = registry.lookup("card")
    assert card.parent == "components"
    assert card.path == "components.html"
    assert registry.lookup("badge").path == "badge.html"

    chunks = []
    registry.template_set.execute(card.template, {"Title": "T"}, chunks.append, {})
    assert "".join(chunks) == '<div class="card">T</div>'

def test_mustache_tokenizes_with_custom_delimiters():
    template_set = MustacheBackend().create_set({}, CompileOptions(delims=("[[", "]]")))
    registry = compile_registry(MemorySource({"page.mustache": "<p>[[name]]</p>"}), ".mustache", template_set)
    chunks = []
    registry.template_set.execute(registry.lookup("page").template, {"name": "x"}, chunks.append, {})
    assert "".join(chunks) == "<p>x</p>"

def test_mustache_unclosed_section_is_a_compile_error():
    template_set = MustacheBackend().create_set({}, CompileOptions())
    with pytest.raises(CompileError) as exc_info:
        compile_registry(MemorySource({"bad.mustache": "{{#items}}no end"}), ".mustache", template_set)
    assert exc_info.value.template_name == "bad"
