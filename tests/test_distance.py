"""Tests for locatorlib.distance module."""

import pytest

from locatorlib.authorization import AuthorizationGate
from locatorlib.config import UriConfig
from locatorlib.distance import (
    METERS_TO_MILES,
    DistanceResolver,
    meters_to_miles,
    straight_line_distance,
)
from locatorlib.models import AuthorizationState, Coordinate, ServiceIdentifier
from locatorlib.sensor import LocationSensorSession

from conftest import DISTANCE_BASE

SF = Coordinate(37.7749, -122.4194)
LA = Coordinate(34.0522, -118.2437)


@pytest.fixture()
def session(sensor):
    return LocationSensorSession(sensor, AuthorizationGate(sensor))


@pytest.fixture()
def resolver(session, transport, uri_config):
    return DistanceResolver(session, transport, uri_config)


def _obtain_fix(sensor, session, coordinate: Coordinate) -> None:
    sensor.state = AuthorizationState.GRANTED_WHEN_IN_USE
    session.start(lambda fix, error: None)
    sensor.deliver_fix(coordinate.latitude, coordinate.longitude)


class TestStraightLine:
    def test_conversion_factor(self):
        assert METERS_TO_MILES == 0.000621371
        assert meters_to_miles(1609.34) == pytest.approx(1.0, abs=1e-3)

    def test_symmetric(self):
        assert straight_line_distance(SF, LA) == pytest.approx(
            straight_line_distance(LA, SF), rel=1e-9
        )

    def test_known_distance(self):
        assert straight_line_distance(SF, LA) == pytest.approx(347.4, rel=1e-2)

    def test_same_point_is_zero(self):
        assert straight_line_distance(SF, SF) == pytest.approx(0.0, abs=1e-9)

    def test_one_degree_of_latitude(self):
        d = straight_line_distance(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
        assert d == pytest.approx(68.71, abs=0.05)


class TestDistanceFromCurrent:
    def test_none_before_first_fix(self, resolver):
        assert resolver.distance_from_current(LA) is None

    def test_uses_last_fix(self, sensor, session, resolver):
        _obtain_fix(sensor, session, SF)
        assert resolver.distance_from_current(LA) == pytest.approx(
            straight_line_distance(SF, LA)
        )


class TestTravelDistance:
    def test_no_anchor_is_sentinel(self, resolver, transport):
        assert resolver.travel_distance(LA) == (0.0, False)
        assert transport.requests == []

    def test_success(self, sensor, session, resolver, transport):
        _obtain_fix(sensor, session, SF)
        transport.queue_json({
            "status": "OK",
            "rows": [{"elements": [{"status": "OK",
                                    "distance": {"value": 616000, "text": "383 mi"}}]}],
        })
        miles, success = resolver.travel_distance(LA)
        assert success is True
        assert miles == pytest.approx(616000 * 0.000621371)

    def test_request_url(self, sensor, session, resolver, transport):
        _obtain_fix(sensor, session, SF)
        transport.queue_json({"status": "OK", "rows": []})
        resolver.travel_distance(LA)
        request = transport.requests[0]
        assert request.identifier is ServiceIdentifier.DISTANCE_MATRIX
        assert request.url == (
            f"{DISTANCE_BASE}origins=34.0522,-118.2437"
            f"&destinations=37.7749,-122.4194"
        )

    @pytest.mark.parametrize(
        "payload",
        [
            {"status": "OK", "rows": [{"elements": [{"status": "NOT_FOUND"}]}]},
            {"status": "OK", "rows": [{"elements": []}]},
            {"status": "OK", "rows": []},
            {"status": "OK"},
            {"status": "REQUEST_DENIED", "rows": [
                {"elements": [{"distance": {"value": 10}}]}]},
            {"status": "OK", "rows": [{"elements": [{"distance": {"value": "far"}}]}]},
            {"status": "OK", "rows": "nope"},
        ],
    )
    def test_bad_payloads_are_sentinel(
        self, sensor, session, resolver, transport, payload
    ):
        _obtain_fix(sensor, session, SF)
        transport.queue_json(payload)
        assert resolver.travel_distance(LA) == (0.0, False)

    def test_transport_error_is_sentinel(self, sensor, session, resolver, transport):
        _obtain_fix(sensor, session, SF)
        transport.queue_error()
        assert resolver.travel_distance(LA) == (0.0, False)

    def test_invalid_json_is_sentinel(self, sensor, session, resolver, transport):
        _obtain_fix(sensor, session, SF)
        transport.queue_raw(b"not json")
        assert resolver.travel_distance(LA) == (0.0, False)

    def test_missing_url_is_sentinel(self, sensor, session, transport):
        resolver = DistanceResolver(session, transport, UriConfig({}))
        _obtain_fix(sensor, session, SF)
        assert resolver.travel_distance(LA) == (0.0, False)
        assert transport.requests == []
