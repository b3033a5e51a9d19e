# viewkit/config/loader.py
"""
Handles loading and merging of engine configuration from TOML files.
"""
import toml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import fields as dataclass_fields
from viewkit.logging_setup import get_logger

from viewkit.exceptions import ConfigError

from .settings import EngineConfig, BackendKind

log = get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".viewkit.toml", "viewkit.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "viewkit"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEYS = {f.name for f in dataclass_fields(EngineConfig)}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read config file {file_path}: {e}") from e
    return data.get("tool", {}).get("viewkit", {}) if file_path.name == "pyproject.toml" else data

def load_and_merge_configs(project_dir: Optional[Path] = None, user_config_file: Optional[Path] = None) -> Dict[str, Any]:
    # user-global settings first, then the first project file found overrides them.
    merged_toml_data: Dict[str, Any] = {}
    user_file = user_config_file if user_config_file is not None else USER_CONFIG_FILE
    if user_file.is_file():
        log.info("loading_user_global_config", path=str(user_file))
        merged_toml_data.update(_load_toml_file_data(user_file))

    base_dir = project_dir if project_dir is not None else Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = base_dir / filename
        if candidate.is_file():
            project_settings = _load_toml_file_data(candidate)
            if project_settings:
                log.info("loading_project_local_config", path=str(candidate))
                merged_toml_data.update(project_settings)
                break
    if not merged_toml_data: log.debug("no_configuration_files_loaded")
    return merged_toml_data

def config_from_mapping(values: Dict[str, Any]) -> EngineConfig:
    """Builds an EngineConfig from raw (toml or cli) values, rejecting unknown keys."""
    unknown = sorted(set(values) - CONFIG_KEYS)
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    kwargs = {k: v for k, v in values.items() if v is not None}
    if "backend" in kwargs and not isinstance(kwargs["backend"], BackendKind):
        backend = BackendKind.from_string(str(kwargs["backend"]))
        if backend is None:
            raise ConfigError(f"Unknown backend '{kwargs['backend']}'. Choose one of: {', '.join(b.value for b in BackendKind)}")
        kwargs["backend"] = backend
    if "delims" in kwargs:
        delims = kwargs["delims"]
        if not isinstance(delims, (list, tuple)) or len(delims) != 2 or not all(isinstance(d, str) and d for d in delims):
            raise ConfigError(f"'delims' must be a pair of non-empty strings, got {delims!r}")
    if "exclude_patterns" in kwargs and not isinstance(kwargs["exclude_patterns"], list):
        raise ConfigError("'exclude_patterns' must be a list of glob patterns")

    try:
        return EngineConfig(**kwargs)
    except (TypeError, ValueError, AttributeError) as e:
        raise ConfigError(f"Invalid engine configuration: {e}") from e
