from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple
from viewkit.logging_setup import get_logger

log = get_logger(__name__)

DEFAULT_EXTENSION = ".html"
DEFAULT_LAYOUT_KEY = "yield"
DEFAULT_ENCODING = "utf-8"
MUSTACHE_EXTENSIONS = (".mustache", ".hbs", ".handlebars")
AUTOESCAPE_EXTENSIONS = (".html", ".htm", ".xml", ".xhtml")

class BackendKind(Enum):
    # template languages a registry can be compiled with.
    JINJA = "jinja"
    MUSTACHE = "mustache"

    @classmethod
    def from_string(cls, s: Optional[str]) -> Optional["BackendKind"]:
        if not s:
            return None
        try:
            return cls(s.lower())
        except ValueError:
            log.warning("invalid_backend_kind_string", input_string=s)
            return None

    @classmethod
    def for_extension(cls, extension: str) -> "BackendKind":
        # mustache-family suffixes go to chevron, everything else to jinja.
        if extension.lower() in MUSTACHE_EXTENSIONS:
            return cls.MUSTACHE
        return cls.JINJA

@dataclass
class EngineConfig:
    # holds every setting an Engine can be constructed from.
    directory: Path = field(default_factory=lambda: Path("views"))
    extension: str = DEFAULT_EXTENSION
    backend: Optional[BackendKind] = None
    reload: bool = False
    debug: bool = False
    layout_key: str = DEFAULT_LAYOUT_KEY
    delims: Optional[Tuple[str, str]] = None
    exclude_patterns: List[str] = field(default_factory=list)
    autoescape: Optional[bool] = None
    strict_undefined: bool = False
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self):
        # normalizes values that commonly arrive as plain strings from toml or the cli.
        self.directory = Path(self.directory)
        if not self.extension.startswith("."):
            self.extension = "." + self.extension
        if isinstance(self.backend, str):
            self.backend = BackendKind.from_string(self.backend)
        if self.delims is not None:
            self.delims = tuple(self.delims)

    @property
    def resolved_backend(self) -> BackendKind:
        return self.backend or BackendKind.for_extension(self.extension)

    @property
    def resolved_autoescape(self) -> bool:
        if self.autoescape is not None:
            return self.autoescape
        return self.extension.lower() in AUTOESCAPE_EXTENSIONS
