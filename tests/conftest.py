import logging
import re
import pytest
import structlog
from pathlib import Path

JINJA_VIEWS = {
    "index.html": '{% include "partials/header" %}\n<h1>{{ Title }}</h1>\n{% include "partials/footer" %}\n',
    "partials/header.html": "<h2>Header</h2>\n",
    "partials/footer.html": "<h2>Footer</h2>\n",
    "errors/404.html": "<h1>{{ Error }}</h1>\n",
    "layouts/main.html": (
        "<!DOCTYPE html>\n<html>\n<head>\n  <title>Main</title>\n</head>\n"
        "<body>\n  {{ yield }}\n</body>\n</html>\n"
    ),
    "admin.html": "{% if isAdmin(User) %}<h1>Hello, Admin!</h1>{% else %}<h1>Access denied!</h1>{% endif %}\n",
    "simple.html": "<h1>{{ Title }}</h1>\n",
    "reload.html": "before reload\n",
}

MUSTACHE_VIEWS = {
    "index.mustache": "{{> partials/header}}\n<h1>{{Title}}</h1>\n{{> partials/footer}}\n",
    "partials/header.mustache": "<h2>Header</h2>\n",
    "partials/footer.mustache": "<h2>Footer</h2>\n",
    "errors/404.mustache": "<h1>{{Error}}</h1>\n",
    "layouts/main.mustache": (
        "<!DOCTYPE html>\n<html>\n<head>\n  <title>Main</title>\n</head>\n"
        "<body>\n  {{{yield}}}\n</body>\n</html>\n"
    ),
    "func_map.mustache": "<h2>{{#lower}}{{Var1}}{{/lower}}</h2><p>{{#upper}}{{Var2}}{{/upper}}</p>\n",
}

def _write_tree(root: Path, files: dict) -> Path:
    for rel_path, content in files.items():
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root

def trim_markup(text: str) -> str:
    # collapses whitespace and drops it around tags, so layouts compare on structure.
    trimmed = re.sub(r"\s+", " ", text).strip()
    return trimmed.replace(" <", "<").replace("> ", ">")

@pytest.fixture
def trim():
    return trim_markup

@pytest.fixture
def jinja_views(tmp_path: Path) -> Path:
    """A jinja template tree with partials, a layout and an error page."""
    return _write_tree(tmp_path / "views", JINJA_VIEWS)

@pytest.fixture
def mustache_views(tmp_path: Path) -> Path:
    """The same tree written in mustache syntax."""
    return _write_tree(tmp_path / "mustache_views", MUSTACHE_VIEWS)

@pytest.fixture
def write_tree():
    return _write_tree

@pytest.fixture(autouse=True)
def reset_logging():
    # configure_logging (run by the cli) must not leak handlers into later tests.
    yield
    structlog.reset_defaults()
    package_logger = logging.getLogger("viewkit")
    package_logger.handlers = [logging.NullHandler()]
    package_logger.setLevel(logging.NOTSET)
