"""
modules/planning/trip_scheduler.py
-----------------------------------
Single entry point for timeline generation.  Every caller (HTTP route, CLI,
export) goes through TripScheduler.generate() so there is exactly one
scheduling policy.

Pipeline:
  1. Drop attractions that fail validation (logged, not raised).
  2. Day Partitioner  → one contiguous bucket per day.
  3. Slot Scheduler   → morning / afternoon packing per bucket.
  4. Timeline Merger  → per-day stable sort of attractions, transit, meals,
                        hotel events and sleep.
  5. flatten_days     → trip-wide stream for export.

generate() is a pure function of its TripSnapshot: no state survives a call,
and the same snapshot always yields the same TripTimeline (including the
derived trip id).  Any input change means calling it again from scratch.

build_snapshot() gathers the inputs: it asks a transit provider for each
day's legs and, when the provider fails for a day, carries on with no
transit for that day.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import asdict
from typing import Callable, Mapping, Optional, Sequence

from schemas.timeline import (
    Attraction,
    DayClock,
    DaySchedule,
    Hotel,
    TransitRoute,
    TripSnapshot,
    TripTimeline,
    TripWindow,
)
from modules.observability.logger import StructuredLogger
from modules.planning.day_partitioner import partition_attractions
from modules.planning.slot_scheduler import schedule_day
from modules.planning.timeline_merger import flatten_days, hotel_events_for_day, merge_day
from modules.validation import filter_valid, validate_attraction

logger = logging.getLogger(__name__)

# (window, day_number, hotels, bucket) → legs; may raise
TransitProvider = Callable[
    [TripWindow, int, Mapping[int, Optional[Hotel]], Sequence[Attraction]],
    Sequence[TransitRoute],
]


def derive_trip_id(snapshot: TripSnapshot) -> str:
    """
    Stable id from the snapshot's window, attraction ids and nightly hotel ids.

    Changing the hotel for any night yields a new id (and a new JSONL file).
    Transit legs are derived data and do not take part.
    """
    window = snapshot.window
    hotels = ",".join(
        f"{day}:{hotel.id if hotel is not None else '-'}"
        for day, hotel in sorted(snapshot.hotels.items())
    )
    key = "|".join([
        window.start_date.isoformat(),
        window.end_date.isoformat(),
        window.home_city,
        window.destination_city,
        ",".join(a.id for a in snapshot.attractions),
        hotels,
    ])
    return "trip_" + hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]


def valid_attractions(attractions: Sequence[Attraction]) -> list[Attraction]:
    return filter_valid(list(attractions), validate_attraction, to_dict=asdict)


def build_snapshot(
    window: TripWindow,
    attractions: Sequence[Attraction],
    hotels: Mapping[int, Optional[Hotel]],
    transit_provider: Optional[TransitProvider] = None,
) -> TripSnapshot:
    """
    Freeze the planner inputs, generating transit legs per day.

    Transit is the documented soft-fail input: a provider error for a day
    is logged and that day is planned without transit.
    """
    clean = valid_attractions(attractions)
    transit: dict[int, tuple[TransitRoute, ...]] = {}

    if transit_provider is not None:
        buckets = partition_attractions(clean, window.number_of_days)
        for day_number, bucket in enumerate(buckets, start=1):
            try:
                legs = transit_provider(window, day_number, hotels, bucket)
            except Exception as exc:  # noqa: BLE001 — any provider failure is soft
                logger.error("Error generating transit routes for day %d: %s", day_number, exc)
                legs = ()
            transit[day_number] = tuple(legs)

    return TripSnapshot(
        window=window,
        attractions=tuple(clean),
        hotels=dict(hotels),
        transit=transit,
    )


class TripScheduler:
    """
    Stateless timeline generator.

    Args:
        clock:     Day clock constants; defaults to DayClock.from_config().
        event_log: Optional StructuredLogger receiving one
                   ``timeline_generated`` record per call.
    """

    def __init__(
        self,
        clock: Optional[DayClock] = None,
        event_log: Optional[StructuredLogger] = None,
    ) -> None:
        self.clock = clock or DayClock.from_config()
        self.event_log = event_log

    def generate(self, snapshot: TripSnapshot, trip_id: Optional[str] = None) -> TripTimeline:
        window = snapshot.window
        trip_id = trip_id or derive_trip_id(snapshot)
        number_of_days = max(1, window.number_of_days)

        attractions = valid_attractions(snapshot.attractions)
        buckets = partition_attractions(attractions, number_of_days)

        days: list[DaySchedule] = []
        for day_number, bucket in enumerate(buckets, start=1):
            day = window.date_for_day(day_number)
            slots = schedule_day(bucket, day, self.clock)
            hotel_events = hotel_events_for_day(
                day_number, number_of_days, snapshot.hotels, day, self.clock,
            )
            days.append(merge_day(
                day_number,
                day,
                slots,
                snapshot.transit.get(day_number, ()),
                hotel_events,
                self.clock,
            ))

        timeline = TripTimeline(
            trip_id=trip_id,
            window=window,
            days=tuple(days),
            items=flatten_days(days),
        )

        dropped = sum(len(d.dropped) for d in days)
        logger.info(
            "%s: %d day(s), %d item(s), %d attraction(s) dropped",
            trip_id, len(days), len(timeline.items), dropped,
        )
        if self.event_log is not None:
            self.event_log.log(trip_id, "timeline_generated", {
                "destination": window.destination_city,
                "days": len(days),
                "items": len(timeline.items),
                "attractions_in": len(snapshot.attractions),
                "attractions_valid": len(attractions),
                "dropped": {d.day_number: [a.name for a in d.dropped] for d in days if d.dropped},
            })
        return timeline


def regenerate(
    window: TripWindow,
    attractions: Sequence[Attraction],
    hotels: Mapping[int, Optional[Hotel]],
    transit_provider: Optional[TransitProvider] = None,
    scheduler: Optional[TripScheduler] = None,
) -> TripTimeline:
    """build_snapshot() followed by generate(); the usual "inputs changed" call."""
    snapshot = build_snapshot(window, attractions, hotels, transit_provider)
    return (scheduler or TripScheduler()).generate(snapshot)
