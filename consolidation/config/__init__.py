"""Configuration for consolidation.

    from consolidation.config import get_settings

    timezone = get_settings().pipeline.timezone
"""

from functools import lru_cache

from consolidation.config.loader import load_config
from consolidation.config.settings import Settings, use_toml_layers


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load the TOML layers once and build the process-wide Settings."""
    use_toml_layers(load_config())
    return Settings()


def reload_settings() -> Settings:
    """Drop the cached Settings and read configuration again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings"]
