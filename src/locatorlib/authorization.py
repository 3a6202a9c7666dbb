"""Location permission tracking."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from locatorlib.models import AuthorizationState

if TYPE_CHECKING:
    from locatorlib.sensor import LocationSensor

logger = logging.getLogger(__name__)

AuthorizationObserver = Callable[[AuthorizationState], None]


class _SensorRelay:
    """Long-lived sensor listener that feeds OS permission reports to a gate."""

    def __init__(self, gate: AuthorizationGate):
        self._gate = gate

    def on_authorization_changed(self, state: AuthorizationState) -> None:
        self._gate.notify(state)

    def on_locations(self, fixes) -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass


class AuthorizationGate:
    """
    Reads, requests and broadcasts the device's location permission.

    The gate never polls. It listens to the sensor for as long as it is
    open, so observers hear every transition the OS reports, whether or
    not a location request is in flight.
    """

    def __init__(self, sensor: LocationSensor):
        self._sensor = sensor
        self._observers: list[AuthorizationObserver] = []
        self._transition_handlers: list[AuthorizationObserver] = []
        self._relay: Optional[_SensorRelay] = _SensorRelay(self)
        sensor.subscribe(self._relay)

    def close(self) -> None:
        """Stop listening to the sensor."""
        if self._relay is not None:
            self._sensor.unsubscribe(self._relay)
            self._relay = None

    def check_authorization(self) -> AuthorizationState:
        return self._sensor.authorization_state()

    def request_authorization(self, always: bool = False) -> None:
        """Show the OS prompt if the user has not decided yet."""
        state = self.check_authorization()
        if state is AuthorizationState.UNDETERMINED:
            logger.debug("Requesting %s authorization",
                         "always" if always else "when-in-use")
            self._sensor.request_authorization(always=always)
        elif always and state is AuthorizationState.GRANTED_WHEN_IN_USE:
            # The OS may offer an upgrade prompt.
            self._sensor.request_authorization(always=True)

    @staticmethod
    def is_usable(state: AuthorizationState) -> bool:
        return state.category == "granted"

    def subscribe(self, observer: AuthorizationObserver) -> Callable[[], None]:
        """Register *observer*; returns a function that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def on_transition(self, handler: AuthorizationObserver) -> None:
        """
        Register *handler* to act on each transition once every observer
        has been told about it. Unlike observers, its errors propagate.
        """
        self._transition_handlers.append(handler)

    def notify(self, state: AuthorizationState) -> None:
        """Broadcast an OS-delivered authorization transition."""
        logger.debug("Authorization changed to %s", state.value)
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception:
                logger.exception("Authorization observer %r failed", observer)
        for handler in list(self._transition_handlers):
            handler(state)
