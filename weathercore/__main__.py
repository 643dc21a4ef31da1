"""Fetch the current temperature for a location and print the JSON envelope."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .app import WeatherApplication
from .entities import TemperatureUnit
from .settings import ConfigurationError, load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weathercore", description=__doc__)
    parser.add_argument("location", help="Location name, e.g. 'Lisbon' or 'Paris, France'")
    parser.add_argument(
        "--unit",
        choices=[unit.value for unit in TemperatureUnit],
        default=TemperatureUnit.CELSIUS.value,
        help="Temperature unit",
    )
    parser.add_argument("--refresh", action="store_true", help="Force a refresh instead of reading the cache")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(exc, file=sys.stderr)
        return 2
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with WeatherApplication(settings) as app:
        if args.refresh:
            response = app.api.handle_request("POST", app.api.REFRESH_PATH, {"location": args.location, "unit": args.unit})
        else:
            response = app.api.handle_request("GET", app.api.CURRENT_PATH, {"location": args.location, "unit": args.unit})
    print(response.body)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
