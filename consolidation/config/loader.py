"""Locate and merge the TOML configuration layers.

``default.toml`` is required. ``<environment>.toml`` is layered on top
when present, table by table.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "CONSOLIDATION_CONFIG_DIR"
ENVIRONMENT_ENV = "CONSOLIDATION_ENV"
DEFAULT_ENVIRONMENT = "development"

# Parent directories searched for a config/ folder
_SEARCH_DEPTH = 5


def find_config_dir(start: Path | None = None) -> Path:
    """Resolve the configuration directory.

    ``CONSOLIDATION_CONFIG_DIR`` wins and must exist. Otherwise the first
    ``config/`` folder found walking up from ``start`` (the working
    directory by default) is used, falling back to a relative ``config``.
    """
    explicit = os.environ.get(CONFIG_DIR_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} points to a missing directory: {path}")
        return path

    here = start or Path.cwd()
    for candidate in [here, *here.parents][:_SEARCH_DEPTH]:
        if (candidate / "config").is_dir():
            return candidate / "config"
    return Path("config")


def current_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def read_toml(path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file is missing
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    return tomllib.loads(path.read_text(encoding="utf-8"))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return base updated with override, merging nested tables.

    Neither argument is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_dir: Path | None = None,
    environment: str | None = None,
) -> dict[str, Any]:
    """Read ``default.toml`` and layer the environment file over it."""
    directory = config_dir or find_config_dir()
    env = environment or current_environment()

    default_file = directory / "default.toml"
    if not default_file.is_file():
        raise FileNotFoundError(
            f"Missing {default_file}; create it or set {CONFIG_DIR_ENV}."
        )
    config = read_toml(default_file)

    env_file = directory / f"{env}.toml"
    if env_file.is_file():
        config = deep_merge(config, read_toml(env_file))
    return config
