# sass_importer/config/loader.py
"""
Handles loading and merging of importer configuration from TOML files.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Optional
import structlog

from sass_importer.exceptions import ConfigError

from .settings import OPTION_KEY_ALIASES, ImporterOptions

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".sass-importer.toml", "sass-importer.toml", "pyproject.toml"]
PYPROJECT_TOOL_KEY = "sass-importer"
USER_CONFIG_DIR = Path.home() / ".config" / "sass-importer"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"


def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"could not read config file '{file_path}': {e}")
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get(PYPROJECT_TOOL_KEY, {})
    return data


def load_and_merge_configs(project_dir: Optional[Path] = None, user_config_file: Optional[Path] = None) -> Dict[str, Any]:
    # user-global config first, then the first project config found; project keys win.
    merged: Dict[str, Any] = {}
    user_file = user_config_file if user_config_file is not None else USER_CONFIG_FILE
    if user_file.is_file():
        log.info("loading_user_global_config", path=str(user_file))
        merged.update(_load_toml_file_data(user_file))

    base = project_dir if project_dir is not None else Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = base / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        user_profiles = merged.get("profiles", {})
        project_profiles = project_settings.pop("profiles", {})
        if isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
            user_profiles.update(project_profiles)
            merged["profiles"] = user_profiles
        merged.update(project_settings)
        break

    if not merged:
        log.debug("no_configuration_files_loaded")
    return merged


def options_from_config(raw_config: Dict[str, Any], profile_name: Optional[str] = None) -> Dict[str, Any]:
    """Extract importer option keys from merged config data.

    Values from the named profile override the top-level ones. A missing
    profile is an error because the user asked for it explicitly.
    """
    selected: Dict[str, Any] = {k: v for k, v in raw_config.items() if k in OPTION_KEY_ALIASES}
    if profile_name:
        profiles = raw_config.get("profiles", {})
        profile_values = profiles.get(profile_name) if isinstance(profiles, dict) else None
        if not isinstance(profile_values, dict):
            raise ConfigError(f"profile '{profile_name}' not found in configuration files")
        log.info("applying_profile_settings", profile=profile_name)
        for key, value in profile_values.items():
            if key in OPTION_KEY_ALIASES:
                selected[key] = value
    return selected


def load_importer_options(profile_name: Optional[str] = None, project_dir: Optional[Path] = None, **overrides: Any) -> ImporterOptions:
    # file config, then profile, then explicit overrides (None means "not given").
    raw = load_and_merge_configs(project_dir=project_dir)
    selected = options_from_config(raw, profile_name)
    normalized: Dict[str, Any] = {OPTION_KEY_ALIASES[k]: v for k, v in selected.items()}
    for key, value in overrides.items():
        if value is not None:
            normalized[key] = value
    return ImporterOptions.from_mapping(normalized)
