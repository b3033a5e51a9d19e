# viewkit/config/__init__.py
"""
Engine configuration: the EngineConfig dataclass and the TOML loader that
fills it from user and project config files.
"""
from .settings import EngineConfig, BackendKind, DEFAULT_LAYOUT_KEY
from .loader import load_and_merge_configs, config_from_mapping

__all__ = ["EngineConfig", "BackendKind", "DEFAULT_LAYOUT_KEY", "load_and_merge_configs", "config_from_mapping"]
