"""One-shot location acquisition on top of a device location sensor."""

from __future__ import annotations

import abc
import logging
from collections.abc import Sequence
from typing import Callable, Optional, Protocol

from locatorlib.authorization import AuthorizationGate
from locatorlib.exceptions import (
    LocatorError,
    PermissionDenied,
    PermissionRestricted,
    SensorFailure,
)
from locatorlib.models import AuthorizationState, LocationFix

logger = logging.getLogger(__name__)

LocationCallback = Callable[[Optional[LocationFix], Optional[LocatorError]], None]


class SensorListener(Protocol):
    """Events a LocationSensor delivers to its subscribers."""

    def on_authorization_changed(self, state: AuthorizationState) -> None: ...

    def on_locations(self, fixes: Sequence[LocationFix]) -> None: ...

    def on_error(self, error: Exception) -> None: ...


class LocationSensor(abc.ABC):
    """
    Platform adapter for the device's location hardware.

    Implementations forward OS events to every subscribed listener.
    """

    @abc.abstractmethod
    def authorization_state(self) -> AuthorizationState:
        """Current OS-reported permission. Must not prompt."""

    @abc.abstractmethod
    def request_authorization(self, always: bool = False) -> None:
        """Show the OS permission prompt."""

    @abc.abstractmethod
    def subscribe(self, listener: SensorListener) -> None: ...

    @abc.abstractmethod
    def unsubscribe(self, listener: SensorListener) -> None: ...

    @abc.abstractmethod
    def start_updates(self) -> None: ...

    @abc.abstractmethod
    def stop_updates(self) -> None: ...

    def services_enabled(self) -> bool:
        """Whether location services are switched on device-wide."""
        return True


class _PendingRequest:
    """Listener bound to a single ``start`` call.

    Events are acted on only while this request is the session's
    current one; anything arriving after it was replaced or resolved
    is ignored.
    """

    def __init__(self, session: LocationSensorSession, on_result: LocationCallback):
        self._session = session
        self.on_result = on_result
        self.handled = False

    @property
    def active(self) -> bool:
        return self._session._pending is self

    def on_authorization_changed(self, state: AuthorizationState) -> None:
        # Transitions reach the session through the gate.
        pass

    def on_locations(self, fixes: Sequence[LocationFix]) -> None:
        if self.active and fixes:
            self._session._located(self, fixes[-1])

    def on_error(self, error: Exception) -> None:
        if self.active:
            self._session._failed(self, SensorFailure(str(error)), error)


class LocationSensorSession:
    """
    Owns the single sensor subscription used to fetch one location fix.

    ``start`` replaces any unresolved earlier request: the earlier
    callback is dropped without being called. Each ``start`` invokes its
    callback at most once, and the subscription is released before
    that happens.
    """

    def __init__(self, sensor: LocationSensor, gate: AuthorizationGate):
        self._sensor = sensor
        self._gate = gate
        self._pending: Optional[_PendingRequest] = None
        self._updating = False
        self.last_fix: Optional[LocationFix] = None
        gate.on_transition(self._authorization_changed)

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    def start(self, on_result: LocationCallback) -> None:
        if self.is_pending:
            logger.debug("Replacing unresolved location request")
        self._release()

        request = _PendingRequest(self, on_result)
        self._pending = request
        self._sensor.subscribe(request)
        # Some sensors report the current state synchronously on subscribe.
        if not request.active or request.handled:
            return

        self._apply_authorization(request, self._gate.check_authorization())

    def enable(self) -> bool:
        """Start sensing on the active subscription, if there is one."""
        if not self.is_pending:
            return False
        self._begin_sensing()
        return True

    def disable(self) -> None:
        """Stop sensing and drop any pending request without calling it."""
        self._release()

    # ── Sensor events ─────────────────────────────────────────────

    def _authorization_changed(self, state: AuthorizationState) -> None:
        request = self._pending
        if request is None:
            return
        request.handled = True
        self._apply_authorization(request, state)

    def _located(self, request: _PendingRequest, fix: LocationFix) -> None:
        self.last_fix = fix
        self._finish(request, fix, None)

    def _failed(
        self, request: _PendingRequest, error: SensorFailure, cause: Exception
    ) -> None:
        error.__cause__ = cause
        self._finish(request, None, error)

    # ── Private helpers ───────────────────────────────────────────

    def _apply_authorization(
        self, request: _PendingRequest, state: AuthorizationState
    ) -> None:
        if self._gate.is_usable(state):
            self._begin_sensing()
        elif state is AuthorizationState.DENIED:
            self._finish(request, None, PermissionDenied())
        elif state is AuthorizationState.RESTRICTED:
            self._finish(request, None, PermissionRestricted())
        else:
            self._gate.request_authorization()

    def _begin_sensing(self) -> None:
        if not self._updating:
            self._updating = True
            self._sensor.start_updates()

    def _finish(
        self,
        request: _PendingRequest,
        fix: Optional[LocationFix],
        error: Optional[LocatorError],
    ) -> None:
        self._release()
        if error is not None:
            logger.info("Location request failed: %s", error)
        request.on_result(fix, error)

    def _release(self) -> None:
        """Tear down the subscription. Safe to call when nothing is active."""
        if self._updating:
            self._updating = False
            self._sensor.stop_updates()
        if self._pending is not None:
            self._sensor.unsubscribe(self._pending)
            self._pending = None
