"""
conftest.py
-----------
Shared builders for the planner tests.  Everything runs offline: the transit
tool is forced into stub mode and JSONL event logs go to a temp directory.
"""

from __future__ import annotations

from datetime import date, time, timedelta

import pytest

import config
from schemas.timeline import (
    Attraction,
    Coordinates,
    DayClock,
    Hotel,
    TimeSlotWindow,
    TripWindow,
)

TRIP_START = date(2026, 3, 2)


def make_attraction(aid: str, minutes: int, name: str | None = None, category: str = "museum") -> Attraction:
    return Attraction(
        id=aid,
        name=name or f"Attraction {aid}",
        estimated_duration_minutes=minutes,
        category=category,
        coordinates=Coordinates(48.86, 2.35),
    )


def make_hotel(hid: str, name: str | None = None) -> Hotel:
    return Hotel(
        id=hid,
        name=name or f"Hotel {hid}",
        address=f"{hid} Rue de Rivoli, Paris",
        coordinates=Coordinates(48.857, 2.352),
        rating=4.2,
    )


def make_window(days: int = 3, home: str = "London", destination: str = "Paris") -> TripWindow:
    return TripWindow(
        start_date=TRIP_START,
        end_date=TRIP_START + timedelta(days=days - 1),
        home_city=home,
        destination_city=destination,
    )


def make_clock(morning: str = "09:00-12:00", afternoon: str = "13:00-17:00") -> DayClock:
    return DayClock(
        morning=TimeSlotWindow.parse("morning", morning),
        afternoon=TimeSlotWindow.parse("afternoon", afternoon),
        meals=(
            TimeSlotWindow.parse("breakfast", "07:30-08:15"),
            TimeSlotWindow.parse("lunch", "12:00-13:00"),
            TimeSlotWindow.parse("dinner", "19:00-20:30"),
        ),
        sleep=TimeSlotWindow.parse("sleep", "22:00-07:00"),
        check_in=time(18, 0),
        check_out=time(8, 15),
        hotel_event_minutes=30,
    )


@pytest.fixture
def clock() -> DayClock:
    return make_clock()


@pytest.fixture(autouse=True)
def _offline(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "USE_STUB_TRANSIT", True)
    monkeypatch.setattr(config, "LOGS_DIR", str(tmp_path / "logs"))
