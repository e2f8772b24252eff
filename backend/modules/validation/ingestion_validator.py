"""
modules/validation/ingestion_validator.py
------------------------------------------
Data-quality guards applied to planner inputs before a timeline is generated.

  Attraction:
    ✓ Non-empty id and name
    ✓ estimated_duration_minutes is numeric, finite and at least one second
    ✓ Latitude in [-90, 90], longitude in [-180, 180]

  Hotel:
    ✓ Non-empty id and name
    ✓ Rating in [1, 5] if present (0.0 treated as absent)

  Trip window:
    ✓ end_date >= start_date
    ✓ number of days <= config.MAX_TRIP_DAYS

  Transit route:
    ✓ end_time >= start_time
    ✓ distance_km and cost >= 0

  Day number:
    ✓ day_number > 0

No validator raises; each returns a ValidationResult.

Usage:
    from modules.validation import validate_attraction, filter_valid

    clean = filter_valid(attractions, validate_attraction, to_dict=asdict)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, TypeVar

import config

T = TypeVar("T")

logger = logging.getLogger(__name__)


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The input record dict (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: dict = field(default_factory=dict, repr=False)

    def __bool__(self) -> bool:
        return self.valid


def _check_coordinates(coords: Any, errors: list[str]) -> None:
    if coords is None:
        return
    lat = coords.get("latitude") if isinstance(coords, dict) else getattr(coords, "latitude", None)
    lon = coords.get("longitude") if isinstance(coords, dict) else getattr(coords, "longitude", None)
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        errors.append(f"coordinates must be numeric (got lat={lat!r}, lon={lon!r})")
        return
    if not (-90.0 <= lat <= 90.0):
        errors.append(f"latitude={lat} is outside valid range [-90, 90]")
    if not (-180.0 <= lon <= 180.0):
        errors.append(f"longitude={lon} is outside valid range [-180, 180]")


def _check_identity(record: dict[str, Any], errors: list[str]) -> None:
    if not str(record.get("id") or "").strip():
        errors.append("id must not be empty or NULL")
    if not str(record.get("name") or "").strip():
        errors.append("name must not be empty or NULL")


# ── Attraction ────────────────────────────────────────────────────────────────

def validate_attraction(record: dict[str, Any]) -> ValidationResult:
    """Validate an attraction record before it enters the day partitioner."""
    errors: list[str] = []
    _check_identity(record, errors)

    duration = record.get("estimated_duration_minutes")
    try:
        minutes = float(duration)
        if not math.isfinite(minutes):
            errors.append(f"estimated_duration_minutes={minutes} must be finite")
        elif int(minutes * 60) <= 0:
            errors.append(f"estimated_duration_minutes={minutes} must be > 0 (at least one second)")
    except (TypeError, ValueError):
        errors.append(f"estimated_duration_minutes={duration!r} must be numeric")

    _check_coordinates(record.get("coordinates"), errors)

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Hotel ─────────────────────────────────────────────────────────────────────

def validate_hotel(record: dict[str, Any]) -> ValidationResult:
    """Validate a hotel record chosen for one or more nights."""
    errors: list[str] = []
    _check_identity(record, errors)
    _check_coordinates(record.get("coordinates"), errors)

    rating = record.get("rating")
    if rating is not None:
        try:
            r = float(rating)
            # 0.0 is the sentinel for "absent" — treated as NULL, not invalid
            if r != 0.0 and not (1.0 <= r <= 5.0):
                errors.append(f"rating={r} is outside valid range [1, 5]")
        except (TypeError, ValueError):
            errors.append(f"rating={rating!r} must be numeric")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Trip window ───────────────────────────────────────────────────────────────

def validate_trip_window(record: dict[str, Any]) -> ValidationResult:
    """
    Validate the trip's calendar range.

    Accepts date objects or YYYY-MM-DD strings.
    """
    errors: list[str] = []
    start = record.get("start_date")
    end = record.get("end_date")

    if start is None or end is None:
        errors.append(f"start_date and end_date are required (got {start!r}, {end!r})")
        return ValidationResult(valid=False, errors=errors, record=record)

    try:
        start_d = start if isinstance(start, date) else date.fromisoformat(str(start))
        end_d = end if isinstance(end, date) else date.fromisoformat(str(end))
    except ValueError:
        errors.append(f"start_date={start!r} or end_date={end!r} is not a valid ISO-8601 date")
        return ValidationResult(valid=False, errors=errors, record=record)

    if end_d < start_d:
        errors.append(f"end_date={end_d} is before start_date={start_d}")
    elif (end_d - start_d).days + 1 > config.MAX_TRIP_DAYS:
        errors.append(
            f"trip spans {(end_d - start_d).days + 1} days; "
            f"the maximum is {config.MAX_TRIP_DAYS}"
        )

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Transit route ─────────────────────────────────────────────────────────────

def validate_transit_route(record: dict[str, Any]) -> ValidationResult:
    """Validate an externally supplied transit leg."""
    errors: list[str] = []
    start = record.get("start_time")
    end = record.get("end_time")

    if not isinstance(start, datetime) or not isinstance(end, datetime):
        errors.append(f"start_time/end_time must be datetimes (got {start!r}, {end!r})")
    elif end < start:
        errors.append(f"end_time={end} is before start_time={start}")

    for key in ("distance_km", "cost"):
        value = record.get(key, 0.0)
        try:
            if float(value) < 0:
                errors.append(f"{key}={value} must be >= 0")
        except (TypeError, ValueError):
            errors.append(f"{key}={value!r} must be numeric")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Day number validation ──────────────────────────────────────────────────────

def validate_day_number(record: dict[str, Any]) -> ValidationResult:
    """Validate a 1-based ``day_number`` key (hotel and transit maps)."""
    errors: list[str] = []
    day_num = record.get("day_number")

    if day_num is not None:
        try:
            d = int(day_num)
            if d <= 0:
                errors.append(f"day_number={d} must be > 0")
        except (TypeError, ValueError):
            errors.append(f"day_number={day_num!r} must be a positive integer")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Batch filter helper ────────────────────────────────────────────────────────

def filter_valid(
    items: list[T],
    validator: Callable[[dict], ValidationResult],
    to_dict: Callable[[T], dict] | None = None,
    log: bool = True,
) -> list[T]:
    """
    Apply a validator to every item in a list, return only the valid ones.

    Args:
        items:     List of items (dataclass instances or dicts).
        validator: One of the validate_* functions above.
        to_dict:   Optional callable to convert each item to a dict.
                   If None, items are assumed to already be dicts or have __dict__.
        log:       If True, log a warning for every rejected record.

    Returns:
        List containing only items that passed validation, in input order.
    """
    valid_items: list[T] = []
    rejected = 0

    for item in items:
        record_dict = (
            to_dict(item)
            if to_dict is not None
            else (item if isinstance(item, dict) else item.__dict__)
        )
        result = validator(record_dict)
        if result.valid:
            valid_items.append(item)
        else:
            rejected += 1
            if log:
                logger.warning(
                    "REJECTED '%s': %s",
                    record_dict.get("name", record_dict.get("id", "?")),
                    "; ".join(result.errors),
                )

    if log and rejected:
        logger.warning(
            "%d/%d records rejected; %d passed.",
            rejected, len(items), len(valid_items),
        )

    return valid_items
