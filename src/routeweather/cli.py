"""CLI entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime

import requests
from dotenv import load_dotenv

from routeweather.config import load_api_keys, load_settings
from routeweather.db.deps import DEFAULT_CLIENT_ID
from routeweather.db.engine import SessionLocal, open_database
from routeweather.digest.links import navigation_links
from routeweather.digest.text import format_digest
from routeweather.errors import RouteWeatherError
from routeweather.pipeline import (
    ProviderClients,
    RouteWeatherOptions,
    cache_entry,
    execute_route_weather,
)
from routeweather.storage.saved_routes import create_saved_route, list_saved_routes
from routeweather.storage.session_cache import save_cached_session

logger = logging.getLogger(__name__)


def _print_progress(stage: str, detail: str | None) -> None:
    print(f"  [{stage}]{' ' + detail if detail else ''}")


def run_plan(
    start: str,
    end: str,
    departure: datetime | None = None,
    interval_km: float | None = None,
    save_name: str | None = None,
) -> None:
    """Plan a route, print the digest, and cache (and optionally save) it."""
    settings = load_settings()
    clients = ProviderClients.from_settings(settings, load_api_keys())
    options = RouteWeatherOptions(interval_km=interval_km or settings.sample_interval_km)

    print(f"Planning {start} -> {end}")
    result = execute_route_weather(
        start,
        end,
        clients,
        departure=departure,
        options=options,
        progress_callback=_print_progress,
    )

    print()
    print(format_digest(result))
    for app_name, url in navigation_links(result.addresses).items():
        print(f"  {app_name}: {url}")

    open_database(settings)
    with SessionLocal() as session:
        save_cached_session(session, DEFAULT_CLIENT_ID, cache_entry(result))
        if save_name is not None:
            saved = create_saved_route(
                session, DEFAULT_CLIENT_ID, save_name, result.addresses, result.route
            )
            print(f"\n  Saved as '{saved.name}' (id {saved.id})")
        session.commit()


def run_saved() -> None:
    """List saved routes."""
    open_database(load_settings())
    with SessionLocal() as session:
        routes = list_saved_routes(session, DEFAULT_CLIENT_ID)
    if not routes:
        print("No saved routes.")
        return
    for r in routes:
        print(f"  {r.id}  {r.name}  ({r.distance_text})")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="routeweather",
        description="Weather conditions along a driving route",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    plan_parser = subparsers.add_parser(
        "plan", help="Plan a route and forecast the weather along it"
    )
    plan_parser.add_argument("start", help="Start address or place name")
    plan_parser.add_argument("end", help="Destination address or place name")
    plan_parser.add_argument(
        "--depart", help="Departure time, ISO 8601 (default: now, local time)"
    )
    plan_parser.add_argument(
        "--interval", type=float, help="Sample spacing in km (default: 5)"
    )
    plan_parser.add_argument(
        "--save", metavar="NAME", nargs="?", const="",
        help="Also save the route (blank name = 'start → end')",
    )

    subparsers.add_parser("saved", help="List saved routes")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if args.command == "saved":
        try:
            run_saved()
        except RouteWeatherError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
    elif args.command == "plan":
        departure = None
        if args.depart:
            try:
                departure = datetime.fromisoformat(args.depart)
            except ValueError:
                print(f"Error: Invalid --depart time: {args.depart}", file=sys.stderr)
                sys.exit(1)
        if args.interval is not None and args.interval <= 0:
            print("Error: --interval must be positive.", file=sys.stderr)
            sys.exit(1)

        try:
            run_plan(args.start, args.end, departure, args.interval, args.save)
        except RouteWeatherError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        except requests.RequestException as exc:
            logger.debug("Provider request failed", exc_info=True)
            print(f"Error: Failed to get route: {exc}", file=sys.stderr)
            sys.exit(1)
        except ValueError as exc:
            logger.debug("Route could not be sampled", exc_info=True)
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
