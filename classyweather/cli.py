"""CLI entry point for the Classy Weather lookup widget."""

import argparse
import asyncio
import logging
import sqlite3
import sys

from classyweather.config.loader import get_config_value, load_config
from classyweather.config.schema import WidgetConfig
from classyweather.core.debounce import Debouncer
from classyweather.core.orchestrator import SearchOrchestrator
from classyweather.ingest.forecast_client import ForecastClient
from classyweather.ingest.geocode_client import GeocodeClient
from classyweather.models.view import ViewState
from classyweather.presentation.formatters import format_view_json, format_view_text
from classyweather.storage import state_repo
from classyweather.storage.database import open_state_db

DEFAULT_CONFIG = "classyweather.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="classyweather",
        description="Look up the daily forecast for a place by name",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument(
        "--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...)"
    )

    sub = parser.add_subparsers(dest="command")

    # search
    search_p = sub.add_parser("search", help="Search once and print the forecast")
    search_p.add_argument(
        "query", nargs="?", default=None,
        help="Place name (defaults to the remembered query)",
    )
    search_p.add_argument("--json", action="store_true", help="Print JSON")

    # watch
    sub.add_parser(
        "watch", help="Read input values from stdin, one per line, and search as you type"
    )

    # last
    last_p = sub.add_parser("last", help="Show the remembered query")
    last_p.add_argument("--clear", action="store_true", help="Forget it instead")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. search.debounce_ms")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "search":
        return _cmd_search(config, args)
    elif args.command == "watch":
        return _cmd_watch(config, args)
    elif args.command == "last":
        return _cmd_last(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def build_orchestrator(
    config: WidgetConfig, conn: sqlite3.Connection
) -> SearchOrchestrator:
    endpoints = config.endpoints
    geocoder = GeocodeClient(
        base_url=endpoints.geocoding_url,
        timeout=endpoints.timeout_seconds,
        user_agent=endpoints.user_agent,
    )
    forecaster = ForecastClient(
        base_url=endpoints.forecast_url,
        timeout=endpoints.timeout_seconds,
        user_agent=endpoints.user_agent,
    )
    return SearchOrchestrator(
        geocoder,
        forecaster,
        state_repo.SqliteStateStore(conn),
        query_key=config.storage.query_key,
    )


def _open_db(config: WidgetConfig, args) -> sqlite3.Connection:
    return open_state_db(args.db or config.storage.db_path)


def _cmd_search(config, args) -> int:
    conn = _open_db(config, args)
    try:
        state = asyncio.run(_search(config, conn, args.query))
    finally:
        conn.close()
    print(format_view_json(state) if args.json else format_view_text(state))
    return 1 if state.error else 0


async def _search(
    config: WidgetConfig, conn: sqlite3.Connection, query: str | None
) -> ViewState:
    orchestrator = build_orchestrator(config, conn)
    remembered = orchestrator.restore()
    orchestrator.commit(remembered if query is None else query)
    try:
        return await orchestrator.wait_settled()
    finally:
        await orchestrator.aclose()


def _cmd_watch(config, args) -> int:
    conn = _open_db(config, args)
    try:
        state = asyncio.run(_watch(config, conn))
    finally:
        conn.close()
    return 1 if state.error else 0


async def _watch(config: WidgetConfig, conn: sqlite3.Connection) -> ViewState:
    orchestrator = build_orchestrator(config, conn)
    orchestrator.subscribe(lambda state: print(format_view_text(state), flush=True))
    debouncer = Debouncer(
        orchestrator.commit, wait_seconds=config.search.debounce_ms / 1000
    )

    initial = orchestrator.restore()
    if initial.strip():
        orchestrator.commit(initial)

    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            debouncer.push(line.rstrip("\r\n"))
        debouncer.flush()
        return await orchestrator.wait_settled()
    finally:
        debouncer.cancel()
        await orchestrator.aclose()


def _cmd_last(config, args) -> int:
    conn = _open_db(config, args)
    key = config.storage.query_key
    try:
        if args.clear:
            state_repo.delete_state(conn, key)
            print("Remembered query cleared")
        else:
            print(state_repo.get_state(conn, key) or "")
    finally:
        conn.close()
    return 0


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            value = get_config_value(config, args.key)
        except KeyError as e:
            print(f"Error: {e}")
            return 1
        if hasattr(value, "model_dump_json"):
            value = value.model_dump_json(indent=2)
        print(value)
        return 0
    else:
        print("Use: config show | config get key")
        return 1
