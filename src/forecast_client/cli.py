"""
Command-line interface for the application.

This module provides the ``forecast-client`` entry point.
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime

from forecast_client import __version__
from forecast_client.client import ApiClient
from forecast_client.config import get_settings
from forecast_client.errors import ForecastError
from forecast_client.logging_config import setup_logging
from forecast_client.schemas import ApiResponse, ExcludeBlock, ExtendBy, Lang, Units


def parse_time(value: str) -> int | datetime:
    """Accept UNIX seconds or an ISO 8601 timestamp."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        msg = f"not a UNIX timestamp or ISO 8601 datetime: {value!r}"
        raise argparse.ArgumentTypeError(msg) from None


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="forecast-client",
        description="Query the Forecast API from the command line",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    forecast_parser = subparsers.add_parser("forecast", help="Fetch a forecast")
    forecast_parser.add_argument(
        "lat", type=float, nargs="?", default=None, help="Latitude (default: from settings)"
    )
    forecast_parser.add_argument(
        "lon", type=float, nargs="?", default=None, help="Longitude (default: from settings)"
    )
    forecast_parser.add_argument(
        "--time",
        type=parse_time,
        default=None,
        help="Time machine request: UNIX seconds or ISO 8601 datetime",
    )
    forecast_parser.add_argument("--units", type=Units, choices=list(Units), default=None)
    forecast_parser.add_argument("--lang", type=Lang, choices=list(Lang), default=None)
    forecast_parser.add_argument(
        "--exclude",
        type=ExcludeBlock,
        choices=list(ExcludeBlock),
        nargs="+",
        default=[],
        help="Blocks to leave out of the response",
    )
    forecast_parser.add_argument("--extend", type=ExtendBy, choices=list(ExtendBy), default=None)
    forecast_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full response as JSON",
    )

    subparsers.add_parser("info", help="Show application info")

    return parser


def format_summary(resp: ApiResponse) -> str:
    """Short human-readable summary of a response."""
    lines = [f"Location: {resp.latitude}, {resp.longitude} ({resp.timezone})"]
    if resp.currently is not None:
        now = resp.currently
        when = now.timestamp.astimezone(resp.tz).strftime("%Y-%m-%d %H:%M %Z")
        lines.append(f"Currently ({when}): {now.summary or 'n/a'}")
        if now.temperature is not None:
            lines.append(f"  Temperature: {now.temperature}")
        if now.precip_probability is not None:
            lines.append(f"  Precipitation: {now.precip_probability:.0%}")
    for name in ("minutely", "hourly", "daily"):
        block = getattr(resp, name)
        if block is not None and block.summary:
            lines.append(f"{name.capitalize()}: {block.summary}")
    for alert in resp.alerts or []:
        lines.append(f"ALERT: {alert.title}")
    return "\n".join(lines)


def cmd_forecast(args: argparse.Namespace) -> int:
    """Handle the 'forecast' command."""
    settings = get_settings()
    lat = args.lat if args.lat is not None else settings.lat
    lon = args.lon if args.lon is not None else settings.lon

    try:
        with ApiClient.from_settings(settings) as client:
            resp = client.forecast(
                lat,
                lon,
                args.time,
                exclude=args.exclude,
                extend=args.extend,
                lang=args.lang,
                units=args.units,
            )
    except (ForecastError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(resp.to_json() if args.json else format_summary(resp))
    return 0


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Base URL: {settings.base_url}")
    print(f"API key: {'set' if settings.api_key else 'missing'}")
    print(f"Debug: {settings.debug}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    setup_logging("DEBUG" if args.debug or settings.debug else settings.log_level)

    commands = {
        "forecast": cmd_forecast,
        "info": cmd_info,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
