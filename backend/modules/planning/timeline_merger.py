"""
modules/planning/timeline_merger.py
------------------------------------
Merges one day's heterogeneous events into a single chronological sequence,
then flattens all days into the trip-wide stream used for export.

Per day, one item is built for every input event, in this insertion order:

  attractions (morning, afternoon) → transit legs → meals → hotel events → sleep

and the list is stable-sorted by start time, so equal start times keep the
insertion order.  The merger never discards anything it is handed; only the
slot scheduler drops attractions.

Transit legs come from an external generator and are not adjusted here; a
leg may softly overlap an attraction visit.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Mapping, Optional, Sequence

from schemas.timeline import (
    AttractionItem,
    DayClock,
    DaySchedule,
    DayTaggedItem,
    Hotel,
    HotelItem,
    MealItem,
    SleepItem,
    TimelineItem,
    TransitItem,
    TransitRoute,
)
from modules.planning.slot_scheduler import SlotSchedule

CHECK_IN = "check_in"
CHECK_OUT = "check_out"


def _same_hotel(a: Optional[Hotel], b: Optional[Hotel]) -> bool:
    if a is None or b is None:
        return False
    return a.id == b.id


def hotel_events_for_day(
    day_number: int,
    number_of_days: int,
    hotels: Mapping[int, Optional[Hotel]],
    day: date,
    clock: DayClock,
) -> list[HotelItem]:
    """
    Check-out / check-in events for ``day_number`` (0, 1 or 2 of them).

    ``hotels[d]`` is the hotel for the night of day d.  A guest checks out
    in the morning when last night's hotel is not tonight's hotel or the trip
    ends today, and checks in in the evening when tonight's hotel is new.
    The last day of a multi-day trip has no overnight stay.
    """
    last_night = hotels.get(day_number - 1) if day_number > 1 else None
    tonight = hotels.get(day_number)
    is_last_day = day_number >= number_of_days
    length = timedelta(minutes=clock.hotel_event_minutes)
    events: list[HotelItem] = []

    if last_night is not None and (is_last_day or not _same_hotel(last_night, tonight)):
        start = datetime.combine(day, clock.check_out)
        events.append(HotelItem(hotel=last_night, event=CHECK_OUT, start=start, end=start + length))

    stays_tonight = not is_last_day or number_of_days == 1
    if tonight is not None and stays_tonight and not _same_hotel(last_night, tonight):
        start = datetime.combine(day, clock.check_in)
        events.append(HotelItem(hotel=tonight, event=CHECK_IN, start=start, end=start + length))

    return events


def fixed_events_for_day(day: date, clock: DayClock) -> tuple[list[MealItem], SleepItem]:
    """Meal windows and the overnight sleep window anchored on ``day``."""
    meals = []
    for window in clock.meals:
        start, end = window.bounds_on(day)
        meals.append(MealItem(label=window.name, start=start, end=end))
    sleep_start, sleep_end = clock.sleep.bounds_on(day)
    return meals, SleepItem(start=sleep_start, end=sleep_end)


def merge_day(
    day_number: int,
    day: date,
    slots: SlotSchedule,
    transit: Sequence[TransitRoute],
    hotel_events: Sequence[HotelItem],
    clock: DayClock,
) -> DaySchedule:
    """Build and stable-sort the day's timeline."""
    items: list[TimelineItem] = [
        AttractionItem(
            attraction=s.attraction,
            start=s.start,
            end=s.end,
            window_name=s.window_name,
        )
        for s in slots.placed
    ]
    items.extend(TransitItem(route=route) for route in transit)

    meals, sleep = fixed_events_for_day(day, clock)
    items.extend(meals)
    items.extend(hotel_events)
    items.append(sleep)

    # list.sort is stable: equal starts keep insertion order
    items.sort(key=lambda item: item.start)

    return DaySchedule(
        day_number=day_number,
        date=day,
        items=tuple(items),
        dropped=slots.dropped,
    )


def flatten_days(days: Sequence[DaySchedule]) -> tuple[DayTaggedItem, ...]:
    """
    Concatenate every day's items tagged with their day number and re-sort
    by absolute start time.  Day labels stay with the tag, so an item that
    starts near midnight keeps the day it was planned on.
    """
    tagged = [
        DayTaggedItem(day_number=schedule.day_number, item=item)
        for schedule in days
        for item in schedule.items
    ]
    tagged.sort(key=lambda entry: entry.item.start)
    return tuple(tagged)
