"""
Device geocoder interface and its default geopy implementation.

A device geocoder turns free-form text or a structured postal query into
candidate placemarks. ``NominatimGeocoder`` backs it with OpenStreetMap
Nominatim through geopy; platform code can supply its own.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from locatorlib.exceptions import InvalidLocation, TransportFailure
from locatorlib.models import Coordinate, Placemark

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "locatorlib"
DEFAULT_TIMEOUT = 30


class DeviceGeocoder(Protocol):
    def geocode(self, query: str) -> list[Placemark]: ...

    def geocode_postal(self, postal_code: str, country: str) -> list[Placemark]: ...


class NominatimGeocoder:
    """DeviceGeocoder backed by geopy's Nominatim client."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        geolocator: Optional[Any] = None,
    ):
        self._geolocator = geolocator or Nominatim(
            user_agent=user_agent, timeout=timeout
        )

    def geocode(self, query: str) -> list[Placemark]:
        return self._lookup(query)

    def geocode_postal(self, postal_code: str, country: str) -> list[Placemark]:
        return self._lookup(
            {"postalcode": postal_code}, country_codes=country.lower()
        )

    def _lookup(self, query: Any, **kwargs: Any) -> list[Placemark]:
        try:
            locations = self._geolocator.geocode(
                query, exactly_one=False, addressdetails=True, **kwargs
            )
        except GeopyError as exc:
            raise TransportFailure("nominatim", str(exc)) from exc
        logger.debug("Nominatim: %d results for %r", len(locations or []), query)
        return [placemark_from_nominatim(loc) for loc in locations or []]


def placemark_from_nominatim(location: Any) -> Placemark:
    """Map a geopy ``Location`` with Nominatim address details."""
    raw = getattr(location, "raw", None) or {}
    address = raw.get("address") or {}
    country_code = address.get("country_code")
    try:
        coordinate: Optional[Coordinate] = Coordinate(
            float(location.latitude), float(location.longitude)
        )
    except (TypeError, ValueError, InvalidLocation):
        coordinate = None
    return Placemark(
        coordinate=coordinate,
        postal_code=address.get("postcode"),
        sub_locality=address.get("suburb") or address.get("neighbourhood"),
        locality=(
            address.get("city") or address.get("town") or address.get("village")
        ),
        state=address.get("state"),
        country=country_code.upper() if country_code else None,
    )
