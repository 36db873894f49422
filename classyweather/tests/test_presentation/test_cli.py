"""Tests for CLI commands."""

import io
import json
import sqlite3
from pathlib import Path

import httpx
import pytest
import respx
import yaml

from classyweather import cli
from classyweather.cli import main

GEO_URL = "https://test-geo.example.com/v1/search"
FORECAST_URL = "https://test-forecast.example.com/v1/forecast"


@pytest.fixture
def mock_api(geocode_paris: dict, forecast_paris: dict):
    """Serve Paris for 'Paris', nothing for anything else."""

    def geocode(request: httpx.Request) -> httpx.Response:
        if request.url.params["name"] == "Paris":
            return httpx.Response(200, json=geocode_paris)
        return httpx.Response(200, json={"generationtime_ms": 0.3})

    with respx.mock(assert_all_called=False) as router:
        geo_route = router.get(GEO_URL).mock(side_effect=geocode)
        forecast_route = router.get(FORECAST_URL).mock(
            return_value=httpx.Response(200, json=forecast_paris)
        )
        yield {"geo": geo_route, "forecast": forecast_route}


def _args(config_path: Path, *rest: str) -> list[str]:
    return ["--config", str(config_path), *rest]


class TestCLI:
    def test_no_command_returns_1(self, capsys):
        assert main([]) == 1

    def test_config_show(self, config_yaml_path: Path, capsys):
        assert main(_args(config_yaml_path, "config", "show")) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["search"]["debounce_ms"] == 10

    def test_config_get(self, config_yaml_path: Path, capsys):
        assert main(_args(config_yaml_path, "config", "get", "search.debounce_ms")) == 0
        assert capsys.readouterr().out.strip() == "10"

    def test_config_get_unknown_key(self, config_yaml_path: Path, capsys):
        assert main(_args(config_yaml_path, "config", "get", "search.nope")) == 1
        assert "not found" in capsys.readouterr().out


class TestSearchCommand:
    def test_success(self, config_yaml_path: Path, mock_api, capsys):
        assert main(_args(config_yaml_path, "search", "Paris")) == 0
        out = capsys.readouterr().out
        assert "Weather in Paris 🇫🇷" in out
        assert "Today" in out
        assert mock_api["forecast"].call_count == 1

    def test_not_found(self, config_yaml_path: Path, mock_api, capsys):
        assert main(_args(config_yaml_path, "search", "zzzzz")) == 1
        assert "Location not found" in capsys.readouterr().out
        assert not mock_api["forecast"].called

    def test_json_output(self, config_yaml_path: Path, mock_api, capsys):
        assert main(_args(config_yaml_path, "search", "Paris", "--json")) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["phase"] == "success"
        assert len(data["series"]) == 7

    def test_forecast_failure(self, config_yaml_path: Path, mock_api, capsys):
        mock_api["forecast"].mock(return_value=httpx.Response(500))
        assert main(_args(config_yaml_path, "search", "Paris")) == 1
        out = capsys.readouterr().out
        assert "Weather in Paris 🇫🇷" in out
        assert "Failed to fetch weather" in out

    def test_remembers_last_query(self, config_yaml_path: Path, mock_api, capsys):
        main(_args(config_yaml_path, "search", "Paris"))
        capsys.readouterr()

        assert main(_args(config_yaml_path, "last")) == 0
        assert capsys.readouterr().out.strip() == "Paris"

        assert main(_args(config_yaml_path, "search")) == 0
        assert mock_api["geo"].call_count == 2
        assert mock_api["geo"].calls[1].request.url.params["name"] == "Paris"

    def test_search_without_memory_is_idle(self, config_yaml_path: Path, mock_api, capsys):
        assert main(_args(config_yaml_path, "search")) == 0
        assert capsys.readouterr().out.strip() == "Classy Weather"
        assert not mock_api["geo"].called

    def test_last_clear(self, config_yaml_path: Path, mock_api, capsys):
        main(_args(config_yaml_path, "search", "Paris"))
        assert main(_args(config_yaml_path, "last", "--clear")) == 0
        capsys.readouterr()
        main(_args(config_yaml_path, "last"))
        assert capsys.readouterr().out.strip() == ""

    def test_last_closes_db_when_read_fails(
        self, config_yaml_path: Path, monkeypatch
    ):
        closed: list[bool] = []

        class TrackingConnection:
            def close(self) -> None:
                closed.append(True)

        def broken_get_state(conn, key):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(cli, "_open_db", lambda config, args: TrackingConnection())
        monkeypatch.setattr(cli.state_repo, "get_state", broken_get_state)

        with pytest.raises(sqlite3.OperationalError):
            main(_args(config_yaml_path, "last"))
        assert closed == [True]


class TestWatchCommand:
    @pytest.fixture
    def slow_debounce_config(self, tmp_path: Path) -> Path:
        data = {
            "endpoints": {"geocoding_url": GEO_URL, "forecast_url": FORECAST_URL},
            "search": {"debounce_ms": 5000},
            "storage": {"db_path": str(tmp_path / "watch.db")},
        }
        path = tmp_path / "watch.yaml"
        path.write_text(yaml.dump(data))
        return path

    def test_only_final_input_is_searched(
        self, slow_debounce_config: Path, mock_api, monkeypatch, capsys
    ):
        monkeypatch.setattr("sys.stdin", io.StringIO("P\nPa\nPar\nPari\nParis\n"))
        assert main(_args(slow_debounce_config, "watch")) == 0

        out = capsys.readouterr().out
        assert "Loading..." in out
        assert "Weather in Paris 🇫🇷" in out
        assert mock_api["geo"].call_count == 1
        assert mock_api["geo"].calls[0].request.url.params["name"] == "Paris"

        main(_args(slow_debounce_config, "last"))
        assert capsys.readouterr().out.strip() == "Paris"

    def test_resumes_remembered_query(
        self, slow_debounce_config: Path, mock_api, monkeypatch, capsys
    ):
        monkeypatch.setattr("sys.stdin", io.StringIO("Paris\n"))
        main(_args(slow_debounce_config, "watch"))

        monkeypatch.setattr("sys.stdin", io.StringIO(""))
        assert main(_args(slow_debounce_config, "watch")) == 0
        assert mock_api["geo"].call_count == 2
