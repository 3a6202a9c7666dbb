"""Typed value models for locatorlib."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from locatorlib.exceptions import InvalidLocation


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 latitude/longitude pair."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.latitude <= 90.0) or not (
            -180.0 <= self.longitude <= 180.0
        ):
            raise InvalidLocation(self.latitude, self.longitude)

    @classmethod
    def parse(cls, raw: str) -> Coordinate:
        """Parse the ``"lat,lng"`` form, e.g. ``"37.77,-122.41"``."""
        parts = raw.split(",")
        if len(parts) != 2:
            raise ValueError(f"Expected 'lat,lng', got: '{raw}'")
        return cls(float(parts[0]), float(parts[1]))

    def as_query(self) -> str:
        return f"{self.latitude},{self.longitude}"


@dataclass(frozen=True)
class LocationFix:
    """A single position reported by the device sensor."""

    coordinate: Coordinate
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class AuthorizationState(enum.Enum):
    UNDETERMINED = "undetermined"
    GRANTED_WHEN_IN_USE = "granted_when_in_use"
    GRANTED_ALWAYS = "granted_always"
    DENIED = "denied"
    RESTRICTED = "restricted"

    @property
    def category(self) -> str:
        """Collapse the two granted states into ``"granted"``."""
        if self in (
            AuthorizationState.GRANTED_WHEN_IN_USE,
            AuthorizationState.GRANTED_ALWAYS,
        ):
            return "granted"
        return self.value


@dataclass(frozen=True)
class Placemark:
    """Normalised geocoding result. Providers often report partial data."""

    coordinate: Optional[Coordinate] = None
    postal_code: Optional[str] = None
    sub_locality: Optional[str] = None
    locality: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to a plain dictionary (useful for JSON serialisation)."""
        return {
            "latitude": self.coordinate.latitude if self.coordinate else None,
            "longitude": self.coordinate.longitude if self.coordinate else None,
            "postal_code": self.postal_code,
            "sub_locality": self.sub_locality,
            "locality": self.locality,
            "state": self.state,
            "country": self.country,
        }


class ServiceIdentifier(enum.Enum):
    """Which kind of remote call a request belongs to."""

    GEOCODE = "geocode"
    DISTANCE_MATRIX = "distance_matrix"


class ServiceMethod(str, enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ServiceRequest:
    """Descriptor for one remote call, handed to the HTTP transport."""

    identifier: ServiceIdentifier
    url: str
    method: ServiceMethod = ServiceMethod.GET
    body: Optional[dict[str, Any]] = None
