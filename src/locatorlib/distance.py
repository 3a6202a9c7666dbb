"""
Distance calculations relative to the device's last known location.

Straight-line distance is the WGS84 geodesic (geopy). Travel distance
comes from a remote distance-matrix provider and never raises: failures
are reported as ``(0.0, False)``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from geopy.distance import geodesic

from locatorlib.config import DISTANCE_MATRIX_KEY, UriConfig
from locatorlib.exceptions import LocatorError
from locatorlib.geocoding import encode_query_url
from locatorlib.models import Coordinate, ServiceIdentifier, ServiceRequest
from locatorlib.sensor import LocationSensorSession
from locatorlib.transport import HttpTransport, parse_json_object

logger = logging.getLogger(__name__)

METERS_TO_MILES = 0.000621371

NO_DISTANCE = (0.0, False)


def meters_to_miles(meters: float) -> float:
    return meters * METERS_TO_MILES


def straight_line_distance(a: Coordinate, b: Coordinate) -> float:
    """Geodesic distance between *a* and *b* in miles."""
    meters = geodesic(
        (a.latitude, a.longitude), (b.latitude, b.longitude)
    ).meters
    return meters_to_miles(meters)


class DistanceResolver:
    def __init__(
        self,
        session: LocationSensorSession,
        transport: HttpTransport,
        config: UriConfig,
    ):
        self._session = session
        self._transport = transport
        self._config = config

    @property
    def anchor(self) -> Optional[Coordinate]:
        """Coordinate of the session's last fix, if any."""
        fix = self._session.last_fix
        return fix.coordinate if fix else None

    def straight_line_distance(self, a: Coordinate, b: Coordinate) -> float:
        return straight_line_distance(a, b)

    def distance_from_current(self, point: Coordinate) -> Optional[float]:
        """Miles from the last fix to *point*, or None before the first fix."""
        anchor = self.anchor
        if anchor is None:
            return None
        return straight_line_distance(anchor, point)

    def travel_distance(self, to: Coordinate) -> tuple[float, bool]:
        """
        Travel distance in miles from *to* to the last fix.

        Returns ``(miles, True)`` on success and ``(0.0, False)`` otherwise.
        """
        anchor = self.anchor
        if anchor is None:
            logger.info("No location fix yet; travel distance unavailable")
            return NO_DISTANCE
        base_url = self._config.url_for(DISTANCE_MATRIX_KEY)
        if base_url is None:
            logger.warning("No '%s' URL configured", DISTANCE_MATRIX_KEY)
            return NO_DISTANCE

        url = (
            f"{base_url}origins={to.as_query()}"
            f"&destinations={anchor.as_query()}"
        )
        request = ServiceRequest(
            ServiceIdentifier.DISTANCE_MATRIX, encode_query_url(url)
        )
        try:
            _, body = self._transport.send(request)
            payload = parse_json_object(body)
        except LocatorError as exc:
            logger.warning("Distance matrix request failed: %s", exc)
            return NO_DISTANCE

        meters = _first_element_distance(payload)
        if meters is None:
            logger.info(
                "Distance matrix returned no distance (status '%s')",
                payload.get("status"),
            )
            return NO_DISTANCE
        return meters_to_miles(meters), True


def _first_element_distance(payload: dict[str, Any]) -> Optional[float]:
    """Read ``rows[0].elements[0].distance.value`` from an OK response."""
    if payload.get("status") != "OK":
        return None
    try:
        value = payload["rows"][0]["elements"][0]["distance"]["value"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return None
    return float(value)
