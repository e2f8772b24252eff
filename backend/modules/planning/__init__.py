"""
modules/planning — day partitioning, slot packing and timeline merging.

Public surface:
    TripScheduler   — the one timeline generator every caller uses
    build_snapshot  — freezes inputs, soft-failing transit per day
    regenerate      — build_snapshot + generate
"""

from modules.planning.trip_scheduler import (
    TripScheduler,
    build_snapshot,
    derive_trip_id,
    regenerate,
)

__all__ = [
    "TripScheduler",
    "build_snapshot",
    "derive_trip_id",
    "regenerate",
]
