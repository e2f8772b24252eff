"""
modules/planning/day_partitioner.py
------------------------------------
Splits the ranked attraction list into one contiguous bucket per trip day.

  per_day = ceil(N / number_of_days)
  bucket(d) = attractions[d * per_day : min((d + 1) * per_day, N)]

Buckets keep the ranking order and never shuffle; days past the supply get
an empty bucket.  Concatenating the buckets in day order gives back the
input list exactly.
"""

from __future__ import annotations

import math
from typing import Sequence

from schemas.timeline import Attraction


def attractions_per_day(total: int, number_of_days: int) -> int:
    """Bucket size for ``total`` attractions over ``number_of_days`` days."""
    return math.ceil(total / max(1, number_of_days))


def bucket_for_day(
    attractions: Sequence[Attraction],
    day_index: int,
    number_of_days: int,
) -> list[Attraction]:
    """Bucket for a 0-based ``day_index``."""
    per_day = attractions_per_day(len(attractions), number_of_days)
    start = day_index * per_day
    end = min(start + per_day, len(attractions))
    return list(attractions[start:end])


def partition_attractions(
    attractions: Sequence[Attraction],
    number_of_days: int,
) -> list[list[Attraction]]:
    """
    Return ``number_of_days`` buckets (at least one).

    An empty attraction list yields empty buckets; that is a valid
    "nothing to visit" day, not an error.
    """
    days = max(1, number_of_days)
    return [bucket_for_day(attractions, d, days) for d in range(days)]
