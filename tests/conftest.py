"""Shared test fixtures — in-memory stand-ins for the device and network."""

import json
from collections.abc import Sequence
from typing import Optional

import pytest

from locatorlib.config import UriConfig
from locatorlib.exceptions import TransportFailure
from locatorlib.models import (
    AuthorizationState,
    Coordinate,
    LocationFix,
    Placemark,
    ServiceRequest,
)
from locatorlib.sensor import LocationSensor, SensorListener

GEOCODE_BASE = "https://geo.test/json?key=abc&address="
DISTANCE_BASE = "https://matrix.test/json?key=abc&"


class FakeSensor(LocationSensor):
    """Records calls and lets tests play the OS side of the sensor."""

    def __init__(self, state: AuthorizationState = AuthorizationState.UNDETERMINED):
        self.state = state
        self.enabled = True
        self.listeners: list[SensorListener] = []
        self.updating = False
        self.start_count = 0
        self.auth_requests: list[bool] = []

    def authorization_state(self) -> AuthorizationState:
        return self.state

    def request_authorization(self, always: bool = False) -> None:
        self.auth_requests.append(always)

    def services_enabled(self) -> bool:
        return self.enabled

    def subscribe(self, listener: SensorListener) -> None:
        self.listeners.append(listener)

    def unsubscribe(self, listener: SensorListener) -> None:
        self.listeners.remove(listener)

    def start_updates(self) -> None:
        self.updating = True
        self.start_count += 1

    def stop_updates(self) -> None:
        self.updating = False

    # ── OS side ───────────────────────────────────────────────────

    def change_authorization(self, state: AuthorizationState) -> None:
        self.state = state
        for listener in list(self.listeners):
            listener.on_authorization_changed(state)

    def deliver_fix(self, latitude: float, longitude: float) -> LocationFix:
        fix = LocationFix(Coordinate(latitude, longitude))
        self.deliver_fixes([fix])
        return fix

    def deliver_fixes(self, fixes: Sequence[LocationFix]) -> None:
        for listener in list(self.listeners):
            listener.on_locations(fixes)

    def fail(self, error: Exception) -> None:
        for listener in list(self.listeners):
            listener.on_error(error)


class FakeGeocoder:
    """DeviceGeocoder returning canned placemarks."""

    def __init__(self, placemarks: Optional[list[Placemark]] = None,
                 error: Optional[Exception] = None):
        self.placemarks = placemarks or []
        self.error = error
        self.queries: list = []

    def geocode(self, query: str) -> list[Placemark]:
        self.queries.append(query)
        return self._answer()

    def geocode_postal(self, postal_code: str, country: str) -> list[Placemark]:
        self.queries.append((postal_code, country))
        return self._answer()

    def _answer(self) -> list[Placemark]:
        if self.error is not None:
            raise self.error
        return list(self.placemarks)


class FakeTransport:
    """HttpTransport stand-in that replays queued responses."""

    def __init__(self):
        self.requests: list[ServiceRequest] = []
        self.responses: list = []
        self.closed = False

    def queue_json(self, payload, status: int = 200) -> None:
        self.responses.append((status, json.dumps(payload).encode("utf-8")))

    def queue_raw(self, body: bytes, status: int = 200) -> None:
        self.responses.append((status, body))

    def queue_error(self, detail: str = "connection refused") -> None:
        self.responses.append(TransportFailure("https://fake.test", detail))

    def send(self, request: ServiceRequest) -> tuple[int, bytes]:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


def google_result(components, lat=37.77, lng=-122.41) -> dict:
    """Build one Google geocode result from (types, short_name) pairs."""
    return {
        "address_components": [
            {"types": types, "short_name": name, "long_name": name}
            for types, name in components
        ],
        "geometry": {"location": {"lat": lat, "lng": lng}},
    }


@pytest.fixture()
def sensor() -> FakeSensor:
    return FakeSensor()


@pytest.fixture()
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def uri_config() -> UriConfig:
    return UriConfig(
        {"googleGeoCode": GEOCODE_BASE, "googleDistanceMatrix": DISTANCE_BASE}
    )


@pytest.fixture()
def locator(sensor, geocoder, transport, uri_config):
    """Create a Locator wired to the fakes."""
    from locatorlib import Locator

    loc = Locator(
        sensor,
        device_geocoder=geocoder,
        transport=transport,
        config=uri_config,
    )
    yield loc
    loc.close()
