"""locatorlib — Current device location, geocoding and distances."""

from locatorlib.client import Locator
from locatorlib.config import UriConfig
from locatorlib.exceptions import (
    ConfigurationError,
    GeoCodingFailed,
    InvalidLocation,
    LocatorError,
    ParseFailure,
    PermissionDenied,
    PermissionRestricted,
    PermissionUndetermined,
    ReverseGeocodingFailed,
    SensorFailure,
    TransportFailure,
)
from locatorlib.models import AuthorizationState, Coordinate, LocationFix, Placemark
from locatorlib.sensor import LocationSensor

__all__ = [
    "Locator",
    "LocationSensor",
    "UriConfig",
    "AuthorizationState",
    "Coordinate",
    "LocationFix",
    "Placemark",
    "LocatorError",
    "PermissionDenied",
    "PermissionRestricted",
    "PermissionUndetermined",
    "SensorFailure",
    "InvalidLocation",
    "ReverseGeocodingFailed",
    "GeoCodingFailed",
    "TransportFailure",
    "ParseFailure",
    "ConfigurationError",
]
