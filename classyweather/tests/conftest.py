"""Shared test fixtures."""

import json
import sqlite3
from collections.abc import Iterator
from pathlib import Path

import pytest
import yaml

from classyweather.storage.database import open_state_db

FIXTURE_DIR = Path(__file__).parent / "fixtures"


class MemoryStateStore:
    """Dict-backed stand-in for SqliteStateStore."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.writes: list[tuple[str, str]] = []

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.data[key] = value


@pytest.fixture
def memory_store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def tmp_db(tmp_path: Path) -> Iterator[sqlite3.Connection]:
    """Create a temporary state database."""
    conn = open_state_db(tmp_path / "test.db")
    yield conn
    conn.close()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def geocode_paris() -> dict:
    with open(FIXTURE_DIR / "geocode_paris.json") as f:
        return json.load(f)


@pytest.fixture
def forecast_paris() -> dict:
    with open(FIXTURE_DIR / "forecast_paris.json") as f:
        return json.load(f)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML pointing at test endpoints."""
    data = {
        "endpoints": {
            "geocoding_url": "https://test-geo.example.com/v1/search",
            "forecast_url": "https://test-forecast.example.com/v1/forecast",
            "timeout_seconds": 5.0,
        },
        "search": {"debounce_ms": 10},
        "storage": {"db_path": str(tmp_path / "widget.db")},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
