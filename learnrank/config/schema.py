"""Core settings schema using Pydantic v2.

The YAML defaults and environment overrides are merged into a plain dict by
the loader and then validated here, so a typo in an override fails loudly
instead of being silently ignored.

Example:
    from learnrank.config import load_settings

    settings = load_settings()
    print(settings.templating.cache_size)
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TEMPLATE_LANG = "jinja"


class TemplatingSettings(BaseModel):
    """Template engine settings.

    Attributes:
        enabled: Whether query templates are rendered at all
        lang: Template language the resolver asks the engine for
        cache_size: Maximum number of compiled templates kept in memory
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(True, description="Render query templates")
    lang: str = Field(DEFAULT_TEMPLATE_LANG, description="Template language")
    cache_size: int = Field(256, gt=0, description="Compiled template cache size")


class StorageSettings(BaseModel):
    """Trained-model storage settings."""

    model_config = ConfigDict(extra="forbid")

    models_dir: str = Field("models", description="Directory of stored model records")


class LoggingSettings(BaseModel):
    """Logging settings."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    level: str = Field("INFO", description="Root log level for learnrank loggers")
    json_format: bool = Field(False, alias="json", description="Emit JSON log lines")

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = str(value).upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level


class CoreSettings(BaseModel):
    """Top-level learnrank settings."""

    model_config = ConfigDict(extra="forbid")

    templating: TemplatingSettings = Field(default_factory=TemplatingSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
