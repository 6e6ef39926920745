"""Root settings model.

Values resolve from, lowest to highest priority: field defaults, the
merged TOML layers, ``CONSOLIDATION_*`` environment variables, and
keyword arguments passed to ``Settings(...)``.
"""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from consolidation.config.models.observability import ObservabilityConfig
from consolidation.config.models.pipeline import PipelineConfig

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Merged TOML content picked up by the next Settings() call
_toml_layers: dict[str, Any] = {}


def use_toml_layers(data: Mapping[str, Any]) -> None:
    """Install merged TOML content for subsequently built Settings."""
    global _toml_layers
    _toml_layers = dict(data)


class TomlLayersSource(PydanticBaseSettingsSource):
    """Expose the installed TOML layers as a pydantic-settings source."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        return _toml_layers.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in _toml_layers.items()
            if name in self.settings_cls.model_fields
        }


class Settings(BaseSettings):
    """Configuration for the consolidation pipeline.

    Nested sections can be overridden from the environment with a double
    underscore, e.g. ``CONSOLIDATION_PIPELINE__URGENCY__STALE_WARNING_DAYS=5``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONSOLIDATION_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="consolidation", description="Name bound to log events")
    debug: bool = Field(default=False, description="Development mode")
    log_level: LogLevel = Field(default="INFO", description="Root log level")

    pipeline: PipelineConfig = Field(
        default_factory=PipelineConfig,
        description="Funnel, urgency and recommendation settings",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Logging settings",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Earlier sources win
        return (init_settings, env_settings, TomlLayersSource(settings_cls))
