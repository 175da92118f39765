"""
Core Configuration Loader

Loads configuration from core_defaults.yaml with support for:
- Environment variable overrides
- Custom config file paths
- Section-specific access
- Schema validation
"""

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from learnrank.config.schema import CoreSettings
from learnrank.framework.errors import InvalidConfigError

ENV_PREFIX = "LEARNRANK"

# Cache for loaded config
_CONFIG_CACHE: dict[str, Any] | None = None


def _find_config_file() -> Path:
    """Find the core_defaults.yaml file."""
    # Check for environment variable override
    env_path = os.environ.get(f"{ENV_PREFIX}_CORE_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    config_path = Path(__file__).resolve().parent / "core_defaults.yaml"

    if not config_path.exists():
        msg = (
            f"Core config file not found at {config_path}. "
            f"Set {ENV_PREFIX}_CORE_CONFIG environment variable to specify a custom location."
        )
        raise FileNotFoundError(msg)

    return config_path


def _apply_env_overrides(config: dict[str, Any], prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """
    Apply environment variable overrides to config.

    Environment variables should follow the pattern:
    LEARNRANK_<SECTION>_<KEY>=value

    Example:
    LEARNRANK_TEMPLATING_CACHE_SIZE=512
    LEARNRANK_LOGGING_LEVEL=DEBUG
    """
    result = copy.deepcopy(config)

    for env_key, env_value in os.environ.items():
        if not env_key.startswith(f"{prefix}_"):
            continue

        # LEARNRANK_TEMPLATING_CACHE_SIZE -> ['templating', 'cache', 'size']
        parts = env_key[len(prefix) + 1 :].lower().split("_")
        if len(parts) < 2:
            continue

        section = parts[0]
        if not isinstance(result.get(section), dict):
            continue

        # Keys may themselves contain underscores
        key = "_".join(parts[1:])
        result[section][key] = _parse_env_value(env_value)

    return result


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def load_core_config(section: str | None = None, reload: bool = False) -> dict[str, Any]:
    """
    Load core configuration from core_defaults.yaml.

    Args:
        section: Optional section name to return (e.g., 'templating', 'storage').
                If None, returns the entire config.
        reload: If True, force reload from disk (ignores cache)

    Returns:
        Configuration dictionary or section dictionary

    Raises:
        FileNotFoundError: If config file cannot be found
        KeyError: If specified section does not exist

    Examples:
        >>> config = load_core_config()
        >>> cache_size = load_core_config('templating').get('cache_size', 256)
    """
    global _CONFIG_CACHE

    if _CONFIG_CACHE is not None and not reload:
        config = _CONFIG_CACHE
    else:
        config_path = _find_config_file()
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

        config = _apply_env_overrides(config)
        _CONFIG_CACHE = config

    if section is None:
        return config

    if section not in config:
        msg = (
            f"Configuration section '{section}' not found. "
            f"Available sections: {', '.join(config.keys())}"
        )
        raise KeyError(msg)

    return config[section]


def load_settings(reload: bool = False) -> CoreSettings:
    """Load and validate the core configuration.

    Raises:
        InvalidConfigError: If the merged configuration does not match the schema
    """
    config = load_core_config(reload=reload)
    try:
        return CoreSettings.model_validate(config)
    except ValidationError as e:
        msg = f"Invalid learnrank configuration: {e}"
        raise InvalidConfigError(msg) from e


def get_config_value(section: str, *keys: str, default: Any = None) -> Any:
    """
    Get a specific config value with fallback.

    Examples:
        >>> lang = get_config_value('templating', 'lang', default='jinja')
    """
    try:
        value = load_core_config(section)
        for key in keys:
            value = value[key]
        return value
    except (KeyError, TypeError):
        return default


def reload_config() -> None:
    """Force reload of configuration from disk."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = None
    load_core_config(reload=True)


def get_templating_config() -> dict[str, Any]:
    """Get templating configuration."""
    return load_core_config("templating")


def get_storage_config() -> dict[str, Any]:
    """Get storage configuration."""
    return load_core_config("storage")
