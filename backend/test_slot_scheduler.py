"""
test_slot_scheduler.py
----------------------
First-fit packing of a day's bucket into the morning and afternoon windows.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from conftest import TRIP_START, make_attraction, make_clock
from modules.planning.slot_scheduler import pack_window, schedule_day


def _at(hh: int, mm: int = 0) -> datetime:
    return datetime(TRIP_START.year, TRIP_START.month, TRIP_START.day, hh, mm)


def _layout(slots):
    return [(s.attraction.id, s.window_name, s.start.strftime("%H:%M"), s.end.strftime("%H:%M"))
            for s in slots]


def test_sixty_sixty_ninety(clock):
    bucket = [make_attraction("A", 60), make_attraction("B", 60), make_attraction("C", 90)]
    result = schedule_day(bucket, TRIP_START, clock)

    assert _layout(result.morning) == [
        ("A", "morning", "09:00", "10:00"),
        ("B", "morning", "10:00", "11:00"),
    ]
    assert _layout(result.afternoon) == [("C", "afternoon", "13:00", "14:30")]
    assert result.dropped == ()


def test_skip_does_not_stop_the_scan(clock):
    bucket = [make_attraction("A", 120), make_attraction("B", 90), make_attraction("C", 60)]
    result = schedule_day(bucket, TRIP_START, clock)

    assert [s.attraction.id for s in result.morning] == ["A", "C"], "C fits after B is skipped"
    assert [s.attraction.id for s in result.afternoon] == ["B"]


def test_exact_fit_is_accepted(clock):
    result = schedule_day([make_attraction("A", 180)], TRIP_START, clock)
    assert len(result.morning) == 1
    assert result.morning[0].end == _at(12), "end == window end is allowed"


def test_overflow_is_dropped_not_raised(clock):
    bucket = [make_attraction("long", 300), make_attraction("short", 30)]
    result = schedule_day(bucket, TRIP_START, clock)
    assert [a.id for a in result.dropped] == ["long"]
    assert [s.attraction.id for s in result.placed] == ["short"]


def test_every_attraction_accounted_for_once(clock):
    bucket = [make_attraction(str(i), m) for i, m in enumerate([45, 200, 90, 75, 120, 30, 240])]
    result = schedule_day(bucket, TRIP_START, clock)
    placed = [s.attraction.id for s in result.placed]
    dropped = [a.id for a in result.dropped]
    assert sorted(placed + dropped) == sorted(a.id for a in bucket)
    assert not set(placed) & set(dropped)


def test_durations_windows_and_order(clock):
    bucket = [make_attraction(str(i), m) for i, m in enumerate([50, 70, 40, 100, 90, 60])]
    result = schedule_day(bucket, TRIP_START, clock)
    by_id = {a.id: a for a in bucket}

    for window, slots in ((clock.morning, result.morning), (clock.afternoon, result.afternoon)):
        start, end = window.bounds_on(TRIP_START)
        for s in slots:
            assert s.end - s.start == timedelta(minutes=by_id[s.attraction.id].estimated_duration_minutes)
            assert start <= s.start and s.end <= end, f"{s.attraction.id} leaks out of {window.name}"
        for prev, nxt in zip(slots, slots[1:]):
            assert prev.end <= nxt.start, "no overlap inside a window"
            assert bucket.index(by_id[prev.attraction.id]) < bucket.index(by_id[nxt.attraction.id]), \
                "placed attractions keep bucket order"


def test_pack_window_is_deterministic(clock):
    bucket = [make_attraction(str(i), m) for i, m in enumerate([30, 150, 45, 60])]
    first = pack_window(bucket, clock.morning, TRIP_START)
    second = pack_window(bucket, clock.morning, TRIP_START)
    assert first == second


def test_empty_bucket(clock):
    result = schedule_day([], TRIP_START, clock)
    assert result.placed == () and result.dropped == ()


def test_greedy_limitation_drops_despite_capacity():
    # 180 + 240 minutes of capacity for 420 minutes of demand, yet one is dropped
    clock = make_clock(morning="09:00-12:00", afternoon="13:00-17:00")
    bucket = [make_attraction(str(i), m) for i, m in enumerate([100, 100, 100, 120])]
    result = schedule_day(bucket, TRIP_START, clock)

    assert [s.attraction.id for s in result.morning] == ["0"]
    assert [s.attraction.id for s in result.afternoon] == ["1", "2"]
    assert [a.id for a in result.dropped] == ["3"]


def test_equal_bounds_window_is_empty():
    # AFTERNOON_WINDOW=13:00-13:00 switches the afternoon off.
    clock = make_clock(afternoon="13:00-13:00")
    assert clock.afternoon.duration_seconds == 0
    start, end = clock.afternoon.bounds_on(TRIP_START)
    assert start == end == _at(13)

    bucket = [make_attraction("A", 120), make_attraction("B", 90)]
    result = schedule_day(bucket, TRIP_START, clock)
    assert [s.attraction.id for s in result.morning] == ["A"]
    assert result.afternoon == ()
    assert [a.id for a in result.dropped] == ["B"]


def test_overnight_window_still_rolls_over(clock):
    start, end = clock.sleep.bounds_on(TRIP_START)
    assert (end - start) == timedelta(hours=9)
    assert end.date() > start.date()
