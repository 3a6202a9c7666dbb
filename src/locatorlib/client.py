"""Locator — the main entry point for the library."""

from __future__ import annotations

from typing import Callable, Optional

from locatorlib.authorization import AuthorizationGate
from locatorlib.config import UriConfig
from locatorlib.distance import DistanceResolver
from locatorlib.exceptions import LocatorError
from locatorlib.geocoder import DeviceGeocoder, NominatimGeocoder
from locatorlib.geocoding import DEFAULT_COUNTRY, GeocodeProviderChain
from locatorlib.models import AuthorizationState, Coordinate, LocationFix, Placemark
from locatorlib.sensor import LocationCallback, LocationSensor, LocationSensorSession
from locatorlib.transport import HttpTransport

Dispatcher = Callable[[Callable[[], None]], None]
PlacemarkCallback = Callable[[Optional[Placemark], Optional[LocatorError]], None]
DistanceCallback = Callable[[float, bool], None]


def call_now(fn: Callable[[], None]) -> None:
    fn()


class Locator:
    """
    Current location, geocoding and distances behind one object.

    Every callback is handed to *dispatcher* so that results arrive on a
    single execution context chosen by the caller (for example
    ``loop.call_soon_threadsafe``). The default runs callbacks inline.
    """

    def __init__(
        self,
        sensor: LocationSensor,
        device_geocoder: Optional[DeviceGeocoder] = None,
        transport: Optional[HttpTransport] = None,
        config: Optional[UriConfig] = None,
        dispatcher: Dispatcher = call_now,
    ):
        self._sensor = sensor
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport()
        self._config = config if config is not None else UriConfig.load()
        self._dispatch = dispatcher

        self.authorization = AuthorizationGate(sensor)
        self.session = LocationSensorSession(sensor, self.authorization)
        self.geocoding = GeocodeProviderChain(
            device_geocoder or NominatimGeocoder(), self._transport, self._config
        )
        self.distances = DistanceResolver(
            self.session, self._transport, self._config
        )

    # ── Current location ──────────────────────────────────────────

    def get_current_location(self, callback: LocationCallback) -> None:
        """
        Fetch one location fix and pass ``(fix, error)`` to *callback*.

        A later call replaces an unresolved earlier one; the earlier
        callback is never invoked.
        """
        self.session.start(
            lambda fix, error: self._dispatch(lambda: callback(fix, error))
        )

    @property
    def last_fix(self) -> Optional[LocationFix]:
        return self.session.last_fix

    def enable(self) -> bool:
        return self.session.enable()

    def disable(self) -> None:
        self.session.disable()

    def is_location_enabled(self) -> bool:
        """Location services are on and this app may use them."""
        return self._sensor.services_enabled() and self.authorization.is_usable(
            self.authorization.check_authorization()
        )

    def request_always_authorization(self) -> None:
        self.authorization.request_authorization(always=True)

    def on_authorization_changed(
        self, observer: Callable[[AuthorizationState], None]
    ) -> Callable[[], None]:
        """Observe authorization changes; returns an unsubscribe function."""
        def dispatched(state: AuthorizationState) -> None:
            self._dispatch(lambda: observer(state))

        return self.authorization.subscribe(dispatched)

    # ── Geocoding ─────────────────────────────────────────────────

    def geocode_address(self, address: str, callback: PlacemarkCallback) -> None:
        self._resolve(lambda: self.geocoding.geocode_address(address), callback)

    def geocode_zip(
        self,
        zipcode: str,
        callback: PlacemarkCallback,
        country: str = DEFAULT_COUNTRY,
    ) -> None:
        self._resolve(
            lambda: self.geocoding.geocode_zip(zipcode, country), callback
        )

    def geocode_address_remote(
        self, address: str, callback: PlacemarkCallback
    ) -> None:
        self._resolve(
            lambda: self.geocoding.geocode_address_remote(address), callback
        )

    # ── Distances ─────────────────────────────────────────────────

    def distance_from_current(self, point: Coordinate) -> Optional[float]:
        """Straight-line miles from the last fix, or None before any fix."""
        return self.distances.distance_from_current(point)

    def travel_distance_from_current(
        self, point: Coordinate, callback: DistanceCallback
    ) -> None:
        miles, success = self.distances.travel_distance(point)
        self._dispatch(lambda: callback(miles, success))

    # ── Lifecycle ─────────────────────────────────────────────────

    def close(self) -> None:
        """Stop sensing and close the transport if this Locator created it."""
        self.session.disable()
        self.authorization.close()
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> Locator:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ── Private helpers ───────────────────────────────────────────

    def _resolve(
        self, lookup: Callable[[], Placemark], callback: PlacemarkCallback
    ) -> None:
        error: Optional[LocatorError] = None
        placemark: Optional[Placemark] = None
        try:
            placemark = lookup()
        except LocatorError as exc:
            error = exc
        self._dispatch(lambda: callback(placemark, error))
