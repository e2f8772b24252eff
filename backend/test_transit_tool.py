"""
test_transit_tool.py
--------------------
TransitTool legs in stub mode, and live mode against a mocked requests
session (no network).
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

import config
from conftest import TRIP_START, make_attraction, make_clock, make_hotel, make_window
from modules.tool_usage.transit_tool import (
    TransitTool,
    TransitUnavailableError,
    _parse_duration_s,
    recommended_mode,
)
from schemas.timeline import RouteType, TransportMode


def _hhmm(route):
    return route.start_time.strftime("%H:%M"), route.end_time.strftime("%H:%M")


def _stub():
    return TransitTool(clock=make_clock(), use_stub=True)


# ── Stub mode ─────────────────────────────────────────────────────────────────

def test_first_day_legs():
    window = make_window(3)
    hotels = {1: make_hotel("H"), 2: make_hotel("H")}
    bucket = [make_attraction("a", 60), make_attraction("b", 90)]

    routes = _stub().routes_for_day(window, 1, hotels, bucket)

    assert [r.route_type for r in routes] == [
        RouteType.HOME_TO_HUB,
        RouteType.HUB_TO_HOTEL,
        RouteType.HOTEL_TO_FIRST_ATTRACTION,
        RouteType.LAST_ATTRACTION_TO_HOTEL,
    ]
    flight, transfer, to_first, to_hotel = routes
    assert _hhmm(flight) == ("08:00", "10:00")
    assert flight.mode == TransportMode.AIRPLANE
    assert transfer.start_time == flight.end_time
    assert _hhmm(to_first) == ("08:45", "09:00"), "arrives as the morning window opens"
    assert _hhmm(to_hotel) == ("17:00", "17:15"), "leaves as the afternoon window closes"
    assert to_first.end_location == "Attraction a"
    assert to_hotel.start_location == "Attraction b"


def test_middle_day_has_city_legs_only():
    window = make_window(3)
    hotels = {1: make_hotel("H"), 2: make_hotel("H")}
    routes = _stub().routes_for_day(window, 2, hotels, [make_attraction("c", 60)])
    assert [r.route_type for r in routes] == [
        RouteType.HOTEL_TO_FIRST_ATTRACTION,
        RouteType.LAST_ATTRACTION_TO_HOTEL,
    ]


def test_last_day_flies_home_from_last_hotel():
    window = make_window(3)
    hotels = {1: make_hotel("H"), 2: make_hotel("K", "Hotel Lutetia")}
    routes = _stub().routes_for_day(window, 3, hotels, [])

    assert [r.route_type for r in routes] == [RouteType.HOTEL_TO_HOME]
    assert routes[0].start_location == "Hotel Lutetia"
    assert routes[0].end_location == "London"
    assert _hhmm(routes[0]) == ("18:00", "20:00")


def test_no_hotel_no_city_legs():
    window = make_window(2)
    routes = _stub().routes_for_day(window, 1, {}, [make_attraction("a", 60)])
    assert [r.route_type for r in routes] == [RouteType.HOME_TO_HUB]


def test_single_day_trip_both_flights():
    window = make_window(1)
    routes = _stub().routes_for_day(window, 1, {1: make_hotel("H")}, [make_attraction("a", 60)])
    assert routes[0].route_type == RouteType.HOME_TO_HUB
    assert routes[-1].route_type == RouteType.HOTEL_TO_HOME


def test_recommended_mode():
    assert recommended_mode(RouteType.HOME_TO_HUB, 900.0) == TransportMode.AIRPLANE
    assert recommended_mode(RouteType.HUB_TO_HOTEL, 25.0) == TransportMode.TAXI
    assert recommended_mode(RouteType.HOTEL_TO_FIRST_ATTRACTION, 0.4) == TransportMode.WALKING
    assert recommended_mode(RouteType.HOTEL_TO_FIRST_ATTRACTION, 3.0) == TransportMode.CYCLING
    assert recommended_mode(RouteType.LAST_ATTRACTION_TO_HOTEL, 12.0) == TransportMode.TAXI


def test_parse_duration():
    assert _parse_duration_s("600s") == 600
    assert _parse_duration_s("123.456s") == 123


# ── Live mode (mocked session) ────────────────────────────────────────────────

def _session_returning(payload):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    session = MagicMock()
    session.post.return_value = response
    return session


def test_live_leg_priced_from_routes_api(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_ROUTES_API_KEY", "test-key")
    session = _session_returning({"routes": [{"duration": "600s", "distanceMeters": 3000}]})
    tool = TransitTool(clock=make_clock(), use_stub=False, session=session)

    window = make_window(3)
    routes = tool.routes_for_day(window, 2, {1: make_hotel("H"), 2: make_hotel("H")},
                                 [make_attraction("a", 60)])

    to_first = routes[0]
    assert to_first.start_time == datetime(TRIP_START.year, TRIP_START.month, 3, 8, 50)
    assert to_first.distance_km == 3.0
    assert to_first.mode == TransportMode.CYCLING
    assert to_first.cost == round(3.0 * config.TAXI_COST_PER_KM, 2)

    _, kwargs = session.post.call_args
    assert kwargs["headers"]["X-Goog-Api-Key"] == "test-key"
    assert kwargs["timeout"] == config.ROUTES_REQUEST_TIMEOUT


def test_live_without_key_is_unavailable(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_ROUTES_API_KEY", "")
    tool = TransitTool(clock=make_clock(), use_stub=False, session=MagicMock())
    with pytest.raises(TransitUnavailableError):
        tool.routes_for_day(make_window(2), 1, {1: make_hotel("H")}, [make_attraction("a", 60)])


def test_live_request_error_is_unavailable(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_ROUTES_API_KEY", "test-key")
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("connection refused")
    tool = TransitTool(clock=make_clock(), use_stub=False, session=session)
    with pytest.raises(TransitUnavailableError):
        tool.routes_for_day(make_window(2), 1, {1: make_hotel("H")}, [make_attraction("a", 60)])


def test_live_malformed_response_is_unavailable(monkeypatch):
    monkeypatch.setattr(config, "GOOGLE_ROUTES_API_KEY", "test-key")
    tool = TransitTool(clock=make_clock(), use_stub=False, session=_session_returning({"routes": []}))
    with pytest.raises(TransitUnavailableError):
        tool.routes_for_day(make_window(2), 1, {1: make_hotel("H")}, [make_attraction("a", 60)])
