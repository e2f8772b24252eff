"""
modules/planning/slot_scheduler.py
-----------------------------------
Packs one day's attraction bucket into the fixed morning and afternoon
sightseeing windows.

Policy (first-fit, order-preserving, greedy, one pass per window):
  1. cursor = window start.  Scan the bucket in order; an attraction is
     placed at [cursor, cursor + duration) iff it ends no later than the
     window end, and the cursor advances.  An attraction that does not fit
     is skipped — the scan does NOT stop, a later shorter one may still fit.
  2. Attractions left over from the morning pass go, in original order,
     through the identical pass against the afternoon window.
  3. Whatever is still unplaced is dropped from the day.  Dropping is a
     deterministic policy, not a failure: nothing is raised and nothing is
     re-queued to another day.

Durations arrive in minutes and are normalised to seconds before any
interval arithmetic.

Known limitation: with no re-ordering, the two passes can drop attractions
even when the windows' total capacity would hold them, e.g. a 180-minute
morning and 240-minute afternoon with durations [100, 100, 100, 120].
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Sequence

from schemas.timeline import Attraction, DayClock, ScheduledAttraction, TimeSlotWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotSchedule:
    """Result of packing one day's bucket."""
    morning: tuple[ScheduledAttraction, ...] = ()
    afternoon: tuple[ScheduledAttraction, ...] = ()
    dropped: tuple[Attraction, ...] = ()

    @property
    def placed(self) -> tuple[ScheduledAttraction, ...]:
        """All placed attractions, morning first."""
        return self.morning + self.afternoon


def pack_window(
    bucket: Sequence[Attraction],
    window: TimeSlotWindow,
    day: date,
) -> tuple[list[ScheduledAttraction], list[Attraction]]:
    """
    Single first-fit pass of ``bucket`` over ``window`` on ``day``.

    Returns (placed, leftover); both keep the bucket's relative order.
    """
    window_start, window_end = window.bounds_on(day)
    cursor = window_start
    placed: list[ScheduledAttraction] = []
    leftover: list[Attraction] = []

    for attraction in bucket:
        duration = timedelta(seconds=attraction.estimated_duration_seconds)
        if cursor + duration <= window_end:
            placed.append(
                ScheduledAttraction(
                    attraction=attraction,
                    window_name=window.name,
                    start=cursor,
                    end=cursor + duration,
                )
            )
            cursor += duration
            logger.debug(
                "Added to %s: %s (%s min)",
                window.name, attraction.name, attraction.estimated_duration_minutes,
            )
        else:
            leftover.append(attraction)

    return placed, leftover


def schedule_day(
    bucket: Sequence[Attraction],
    day: date,
    clock: DayClock,
) -> SlotSchedule:
    """Morning pass, then afternoon pass over the leftovers, then drop the rest."""
    morning, remaining = pack_window(bucket, clock.morning, day)
    afternoon, dropped = pack_window(remaining, clock.afternoon, day)

    if dropped:
        logger.debug(
            "%s: %d attraction(s) did not fit any window: %s",
            day.isoformat(), len(dropped), ", ".join(a.name for a in dropped),
        )

    return SlotSchedule(
        morning=tuple(morning),
        afternoon=tuple(afternoon),
        dropped=tuple(dropped),
    )
