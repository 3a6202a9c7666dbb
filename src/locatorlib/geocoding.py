"""
Forward geocoding through the device geocoder and the remote provider.

The device path and the remote path are independent: a device miss is
reported as ReverseGeocodingFailed and never retried remotely.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

from locatorlib.config import GEOCODE_KEY, UriConfig
from locatorlib.exceptions import (
    GeoCodingFailed,
    InvalidLocation,
    LocatorError,
    ParseFailure,
    ReverseGeocodingFailed,
)
from locatorlib.geocoder import DeviceGeocoder
from locatorlib.models import Coordinate, Placemark, ServiceIdentifier, ServiceRequest
from locatorlib.transport import HttpTransport, parse_json_object

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY = "US"

# RFC 3986 query characters, plus "+" and "&" which callers embed in
# addresses and base URLs and which must reach the provider unescaped.
_QUERY_SAFE = "!$&'()*+,/:;=?@"

# Placemark field fed by each Google address component type.
_COMPONENT_FIELDS = (
    ("postal_code", "postal_code"),
    ("sublocality", "sub_locality"),
    ("locality", "locality"),
    ("administrative_area_level_1", "state"),
    ("country", "country"),
)


def encode_query_url(url: str) -> str:
    """Percent-encode *url* for use as a request URL, keeping ``+`` and ``&``."""
    return quote(url, safe=_QUERY_SAFE)


class GeocodeProviderChain:
    def __init__(
        self,
        device_geocoder: DeviceGeocoder,
        transport: HttpTransport,
        config: UriConfig,
    ):
        self._device = device_geocoder
        self._transport = transport
        self._config = config

    def geocode_address(self, address: str) -> Placemark:
        """
        Resolve *address* with the device geocoder.

        Raises ReverseGeocodingFailed when the geocoder fails or has no result.
        """
        return self._first_device_result(
            lambda: self._device.geocode(address), address
        )

    def geocode_zip(self, zipcode: str, country: str = DEFAULT_COUNTRY) -> Placemark:
        """Structured postal-code lookup with the device geocoder."""
        return self._first_device_result(
            lambda: self._device.geocode_postal(zipcode, country),
            f"{zipcode}, {country}",
        )

    def geocode_address_remote(self, address: str) -> Placemark:
        """
        Resolve *address* with the remote geocoding provider.

        Raises GeoCodingFailed on any transport, parse or provider failure.
        """
        base_url = self._config.url_for(GEOCODE_KEY)
        if base_url is None:
            logger.warning("No '%s' URL configured", GEOCODE_KEY)
            raise GeoCodingFailed()

        request = ServiceRequest(
            ServiceIdentifier.GEOCODE, encode_query_url(base_url + address)
        )
        try:
            _, body = self._transport.send(request)
            return parse_geocode_response(body)
        except GeoCodingFailed:
            logger.info("Remote geocoder: no result for '%s'", address)
            raise
        except LocatorError as exc:
            logger.warning("Remote geocoder error for '%s': %s", address, exc)
            raise GeoCodingFailed() from exc

    def _first_device_result(self, lookup, description: str) -> Placemark:
        try:
            placemarks = lookup()
        except LocatorError as exc:
            logger.warning("Device geocoder error for '%s': %s", description, exc)
            raise ReverseGeocodingFailed() from exc
        if not placemarks:
            logger.info("Device geocoder: no result for '%s'", description)
            raise ReverseGeocodingFailed()
        return placemarks[0]


def parse_geocode_response(body: bytes) -> Placemark:
    """
    Normalise a Google-style geocode envelope into a Placemark.

    Raises GeoCodingFailed for a non-OK status or an empty result list,
    and ParseFailure when the envelope has the wrong shape.
    """
    payload = parse_json_object(body)
    status = payload.get("status")
    if status != "OK":
        logger.info("Remote geocoder status '%s'", status)
        raise GeoCodingFailed()

    results = payload.get("results")
    if not isinstance(results, list):
        raise ParseFailure("'results' is not a list")
    if not results:
        raise GeoCodingFailed()
    if not isinstance(results[0], dict):
        raise ParseFailure("'results[0]' is not an object")
    return placemark_from_google_result(results[0])


def placemark_from_google_result(result: dict[str, Any]) -> Placemark:
    """
    Build a Placemark from one Google geocode result.

    For each field, the first address component listing its type wins.
    """
    fields: dict[str, Optional[str]] = {}
    components = result.get("address_components")
    for component in components if isinstance(components, list) else []:
        if not isinstance(component, dict):
            continue
        types = component.get("types")
        short_name = component.get("short_name")
        if not isinstance(types, list) or not isinstance(short_name, str):
            continue
        for tag, name in _COMPONENT_FIELDS:
            if tag in types and name not in fields:
                fields[name] = short_name

    return Placemark(coordinate=_coordinate_from_geometry(result), **fields)


def _coordinate_from_geometry(result: dict[str, Any]) -> Optional[Coordinate]:
    geometry = result.get("geometry")
    location = geometry.get("location") if isinstance(geometry, dict) else None
    if not isinstance(location, dict):
        return None
    lat, lng = location.get("lat"), location.get("lng")
    if not _is_number(lat) or not _is_number(lng):
        raise ParseFailure("'geometry.location' lacks numeric lat/lng")
    try:
        return Coordinate(float(lat), float(lng))
    except InvalidLocation as exc:
        raise ParseFailure(str(exc)) from exc


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
