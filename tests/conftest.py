"""Shared fixtures for the consolidation test suite."""

from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from consolidation.clock import FixedClock


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Empty config/ directory under tmp_path."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Write TOML files into test_config_dir.

    Usage:
        mock_toml_files({"default.toml": "[pipeline]\\ntimezone = 'UTC'"})
    """

    def _write(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _write


@pytest.fixture
def env_override(monkeypatch: pytest.MonkeyPatch) -> Callable[[dict[str, str]], None]:
    """Set CONSOLIDATION_* variables for the duration of a test."""

    def _override(values: dict[str, str]) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)

    return _override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Isolate tests from cached Settings and installed TOML layers."""
    from consolidation.config import get_settings
    from consolidation.config.settings import use_toml_layers

    get_settings.cache_clear()
    use_toml_layers({})
    yield
    get_settings.cache_clear()
    use_toml_layers({})


@pytest.fixture
def now() -> datetime:
    """A fixed evaluation instant: 2024-03-15 12:00 UTC."""
    return datetime(2024, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock(now: datetime) -> FixedClock:
    return FixedClock(now)


@pytest.fixture
def organization_id() -> UUID:
    return uuid4()


@pytest.fixture
def owner_id() -> UUID:
    return uuid4()
