"""Configuration loading for learnrank.

Core configuration lives in ``core_defaults.yaml`` next to this module and can
be overridden per value with ``LEARNRANK_<SECTION>_<KEY>`` environment
variables, or replaced wholesale with ``LEARNRANK_CORE_CONFIG``.

Example:
    from learnrank.config import get_config_value, load_settings

    settings = load_settings()
    lang = get_config_value("templating", "lang", default="jinja")
"""

from learnrank.config.loader import (
    get_config_value,
    get_storage_config,
    get_templating_config,
    load_core_config,
    load_settings,
    reload_config,
)
from learnrank.config.schema import (
    DEFAULT_TEMPLATE_LANG,
    CoreSettings,
    LoggingSettings,
    StorageSettings,
    TemplatingSettings,
)

__all__ = [
    "DEFAULT_TEMPLATE_LANG",
    "CoreSettings",
    "LoggingSettings",
    "StorageSettings",
    "TemplatingSettings",
    "get_config_value",
    "get_storage_config",
    "get_templating_config",
    "load_core_config",
    "load_settings",
    "reload_config",
]
