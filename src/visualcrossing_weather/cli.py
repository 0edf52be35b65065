"""CLI: fetch a Timeline document once and print a daily summary."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .exceptions import (
    ConfigError,
    InvalidFormatError,
    InvalidParameterTypeError,
    InvalidValueError,
    WeatherFetchError,
    WeatherRequestError,
)
from .log_setup import setup_logger
from .store import WeatherStore


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse weather CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Fetch Visual Crossing Timeline weather data for one location."
    )
    parser.add_argument("--location", type=str, default=None, help="Address, city or lat,lon.")
    parser.add_argument(
        "--from",
        dest="from_date",
        type=str,
        default="",
        help="Start date (YYYY-MM-DD, datetime or dynamic period such as next7days).",
    )
    parser.add_argument("--to", dest="to_date", type=str, default="", help="End date.")
    parser.add_argument(
        "--unit-group",
        choices=["us", "uk", "metric", "base"],
        default=None,
        help="Unit system; defaults to WEATHER_UNIT_GROUP.",
    )
    parser.add_argument(
        "--include", type=str, default="", help="Comma-separated response sections."
    )
    parser.add_argument(
        "--elements", type=str, default="", help="Comma-separated weather elements."
    )
    parser.add_argument(
        "--max-print",
        type=int,
        default=None,
        help="Number of days to print.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def _resolve_location(args: argparse.Namespace, settings: Settings) -> str:
    location = args.location or settings.weather_default_location
    if not location:
        raise WeatherRequestError(
            "Missing location input: pass --location or set WEATHER_DEFAULT_LOCATION."
        )
    if args.max_print is not None and args.max_print <= 0:
        raise WeatherRequestError("--max-print must be > 0 when provided.")
    return location


def _format(value: Any, suffix: str = "") -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:g}{suffix}"
    return f"{value}{suffix}"


def _print_summary(console: Console, store: WeatherStore, max_print: int) -> None:
    days = store.get_weather_daily_data()
    console.print(
        f"Location={store.get_resolved_address() or store.get_address() or 'unknown'} "
        f"timezone={store.get_timezone() or '-'} days={len(days)} "
        f"queryCost={_format(store.get_query_cost())}"
    )
    if not days:
        console.print("No daily data found.")
        return

    table = Table(title="Daily Weather")
    table.add_column("Date")
    table.add_column("Temp")
    table.add_column("Min/Max")
    table.add_column("Precip %")
    table.add_column("Wind")
    table.add_column("Conditions", overflow="fold")

    for index in range(min(max_print, len(days))):
        tempmin = store.get_tempmin_on_day(index)
        tempmax = store.get_tempmax_on_day(index)
        table.add_row(
            _format(store.get_field_on_day(index, "datetime")),
            _format(store.get_temp_on_day(index)),
            f"{_format(tempmin)}/{_format(tempmax)}",
            _format(store.get_precipprob_on_day(index)),
            _format(store.get_windspeed_on_day(index)),
            _format(store.get_conditions_on_day(index)),
        )
    console.print(table)


async def _fetch(
    store: WeatherStore, args: argparse.Namespace, location: str, unit_group: str
) -> None:
    async with store:
        await store.fetch_weather_data(
            location,
            from_date=args.from_date,
            to_date=args.to_date,
            unit_group=unit_group,
            include=args.include,
            elements=args.elements,
        )


def main(argv: list[str] | None = None) -> int:
    """Run one fetch and print the result."""
    args = parse_args(argv)
    logger = setup_logger(level=logging.DEBUG if args.debug else logging.INFO)
    console = Console()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    store = WeatherStore.from_settings(settings, logger=logger.getChild("store"))
    try:
        location = _resolve_location(args, settings)
        unit_group = args.unit_group or settings.weather_unit_group
        asyncio.run(_fetch(store, args, location, unit_group))
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    except (
        WeatherRequestError,
        WeatherFetchError,
        InvalidFormatError,
        InvalidValueError,
        InvalidParameterTypeError,
    ) as exc:
        logger.error("Weather request failure: %s", exc)
        return 4

    _print_summary(console, store, max_print=args.max_print or settings.weather_max_print)
    return 0


if __name__ == "__main__":
    sys.exit(main())
