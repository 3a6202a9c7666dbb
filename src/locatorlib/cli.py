"""
Geocoding lookup — Interactive CLI
==================================
Thin wrapper around the locatorlib geocoding and distance helpers.

Usage:
    locatorlib                                 # interactive mode
    locatorlib geocode "1600 Amphitheatre Pkwy" # remote geocode
    locatorlib zip 94016 [US]                  # device (Nominatim) geocode
    locatorlib distance 37.77,-122.41 34.05,-118.24

Provider URLs are read from environment variables:
    LOCATOR_GOOGLE_GEOCODE_URL          Base URL, the address is appended
    LOCATOR_GOOGLE_DISTANCE_MATRIX_URL  Base URL for the distance matrix
    LOCATOR_URI_CONFIG                  JSON file with the same keys

Other settings:
    LOCATOR_HTTP_TIMEOUT   Remote call timeout in seconds (default 30)
    LOCATOR_LOG_LEVEL      Enable logging at this level, e.g. DEBUG
"""

import logging
import os
import sys

from locatorlib.config import UriConfig
from locatorlib.distance import straight_line_distance
from locatorlib.exceptions import ConfigurationError, InvalidLocation, LocatorError
from locatorlib.geocoder import NominatimGeocoder
from locatorlib.geocoding import GeocodeProviderChain
from locatorlib.models import Coordinate, Placemark
from locatorlib.transport import DEFAULT_TIMEOUT, HttpTransport

_USAGE = (
    "Usage: locatorlib [geocode ADDRESS | zip ZIPCODE [COUNTRY] "
    "| distance LAT,LNG LAT,LNG]"
)

_BANNER = """\
╔══════════════════════════════════════╗
║          Geocoding Lookup            ║
║     Address → Placemark + Coords     ║
╚══════════════════════════════════════╝
Type 'q' to quit.
"""


def _print_placemark(placemark: Placemark) -> None:
    for key, val in placemark.to_dict().items():
        print(f"{key:>20}: {val if val is not None else '-'}")


def _run_interactive(chain: GeocodeProviderChain) -> None:
    print(_BANNER)

    while True:
        try:
            raw_address = input("\nAddress:  ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if raw_address.lower() in ("q", "quit", "exit"):
            print("Bye!")
            break
        if not raw_address:
            print("  ✗ Address is required.")
            continue

        print("  ⏳ Geocoding …", end="", flush=True)
        try:
            placemark = chain.geocode_address_remote(raw_address)
        except LocatorError as exc:
            print(f"\r  ✗ {exc.message}")
            continue

        print("\r  ✓ Match found")
        _print_placemark(placemark)


def _timeout_from_env() -> float:
    raw = os.environ.get("LOCATOR_HTTP_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            "LOCATOR_HTTP_TIMEOUT", f"not a number: '{raw}'"
        ) from exc


def _run_command(args: list[str], chain: GeocodeProviderChain) -> int:
    command, rest = args[0], args[1:]
    if command == "geocode" and len(rest) == 1:
        _print_placemark(chain.geocode_address_remote(rest[0]))
    elif command == "zip" and len(rest) in (1, 2):
        _print_placemark(chain.geocode_zip(*rest))
    elif command == "distance" and len(rest) == 2:
        try:
            a, b = Coordinate.parse(rest[0]), Coordinate.parse(rest[1])
        except (ValueError, InvalidLocation) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 2
        print(f"{straight_line_distance(a, b):.3f} mi")
    else:
        print(_USAGE, file=sys.stderr)
        return 2
    return 0


def main() -> None:
    """Entry point — supports both CLI args and interactive mode."""
    level = os.environ.get("LOCATOR_LOG_LEVEL")
    if level:
        logging.basicConfig(level=level.upper())

    try:
        config = UriConfig.load()
        transport = HttpTransport(timeout=_timeout_from_env())
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    chain = GeocodeProviderChain(NominatimGeocoder(), transport, config)
    try:
        if len(sys.argv) > 1:
            try:
                code = _run_command(sys.argv[1:], chain)
            except LocatorError as exc:
                print(f"{exc.message}.", file=sys.stderr)
                code = 1
            sys.exit(code)
        _run_interactive(chain)
    finally:
        transport.close()


if __name__ == "__main__":
    main()
