"""
schemas/timeline.py
-------------------
Dataclass definitions for the trip timeline: planner inputs (trip window,
attractions, hotels, transit legs) and the chronological output (timeline
items, day schedules, the flattened trip stream).

All records are frozen — one generation request derives them once and never
patches them.  Any input change means a full regeneration.

Time units:
  Attraction.estimated_duration_minutes → minutes (as supplied by the places source)
  every interval computation                  → seconds (minutes × 60)
  datetimes                                   → naive, destination-local clock
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Mapping, Optional, Union

import config


def parse_clock(value: str) -> time:
    """Parse an "HH:MM" clock string."""
    hours, minutes = value.strip().split(":")
    return time(int(hours), int(minutes))


def parse_clock_window(value: str) -> tuple[time, time]:
    """Parse an "HH:MM-HH:MM" clock window."""
    start, end = value.split("-")
    return parse_clock(start), parse_clock(end)


# ─────────────────────────────────────────────────────────────────────────────
# Inputs
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Coordinates:
    latitude: float = 0.0
    longitude: float = 0.0


@dataclass(frozen=True)
class TripWindow:
    """
    Inclusive calendar range of the trip.

    home_city / destination_city only label exports and generated transit
    legs; scheduling never reads them.
    """
    start_date: date
    end_date: date
    home_city: str = ""
    destination_city: str = ""
    departure_time: time = field(default_factory=lambda: parse_clock(config.DEFAULT_DEPARTURE_TIME))
    return_time: time = field(default_factory=lambda: parse_clock(config.DEFAULT_RETURN_TIME))

    @property
    def number_of_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def date_for_day(self, day_number: int) -> date:
        """Calendar date of a 1-based day number."""
        return self.start_date + timedelta(days=day_number - 1)


@dataclass(frozen=True)
class Attraction:
    """A candidate attraction as returned by the places search, in ranking order."""
    id: str
    name: str
    estimated_duration_minutes: int
    category: str = ""
    coordinates: Coordinates = field(default_factory=Coordinates)
    description: str = ""
    website_url: Optional[str] = None
    tips: tuple[str, ...] = ()

    @property
    def estimated_duration_seconds(self) -> int:
        return int(self.estimated_duration_minutes * 60)


@dataclass(frozen=True)
class Hotel:
    id: str
    name: str
    address: str = ""
    coordinates: Coordinates = field(default_factory=Coordinates)
    rating: Optional[float] = None
    price_level: Optional[str] = None          # "€" … "€€€€"
    amenities: tuple[str, ...] = ()


class RouteType(str, Enum):
    HOME_TO_HUB = "Home to Hub"
    HUB_TO_HOTEL = "Hub to Hotel"
    HOTEL_TO_FIRST_ATTRACTION = "Hotel to First Attraction"
    LAST_ATTRACTION_TO_HOTEL = "Last Attraction to Hotel"
    HOTEL_TO_HOME = "Hotel to Home"


class TransportMode(str, Enum):
    AIRPLANE = "Airplane"
    TRAIN = "Train"
    BUS = "Bus"
    SUBWAY = "Subway"
    TAXI = "Taxi"
    RIDESHARE = "Rideshare"
    WALKING = "Walking"
    CYCLING = "Cycling"
    CAR = "Car"
    FERRY = "Ferry"


@dataclass(frozen=True)
class TransitRoute:
    """A precomputed transit leg; the merger treats it as an opaque timed event."""
    route_type: RouteType
    start_location: str
    end_location: str
    mode: TransportMode
    start_time: datetime
    end_time: datetime
    distance_km: float = 0.0
    cost: float = 0.0
    description: str = ""
    instructions: tuple[str, ...] = ()

    @property
    def elapsed_seconds(self) -> int:
        return int((self.end_time - self.start_time).total_seconds())


# ─────────────────────────────────────────────────────────────────────────────
# Day clock
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TimeSlotWindow:
    """
    A fixed clock-time window of a day (morning sightseeing, lunch, sleep …).

    An end before the start means the window runs past midnight into the
    next calendar day.  Equal bounds give an empty window (nothing fits).
    """
    name: str
    start: time
    end: time

    @classmethod
    def parse(cls, name: str, value: str) -> "TimeSlotWindow":
        start, end = parse_clock_window(value)
        return cls(name=name, start=start, end=end)

    def bounds_on(self, day: date) -> tuple[datetime, datetime]:
        start = datetime.combine(day, self.start)
        end = datetime.combine(day, self.end)
        if end < start:
            end += timedelta(days=1)
        return start, end

    @property
    def duration_seconds(self) -> int:
        # Duration is the same for every day, so any reference date works.
        start, end = self.bounds_on(date(2000, 1, 1))
        return int((end - start).total_seconds())


@dataclass(frozen=True)
class DayClock:
    """Every fixed clock constant of a planned day."""
    morning: TimeSlotWindow
    afternoon: TimeSlotWindow
    meals: tuple[TimeSlotWindow, ...]
    sleep: TimeSlotWindow
    check_in: time
    check_out: time
    hotel_event_minutes: int = 30

    @classmethod
    def from_config(cls) -> "DayClock":
        return cls(
            morning=TimeSlotWindow.parse("morning", config.MORNING_WINDOW),
            afternoon=TimeSlotWindow.parse("afternoon", config.AFTERNOON_WINDOW),
            meals=(
                TimeSlotWindow.parse("breakfast", config.BREAKFAST_WINDOW),
                TimeSlotWindow.parse("lunch", config.LUNCH_WINDOW),
                TimeSlotWindow.parse("dinner", config.DINNER_WINDOW),
            ),
            sleep=TimeSlotWindow.parse("sleep", config.SLEEP_WINDOW),
            check_in=parse_clock(config.HOTEL_CHECK_IN_TIME),
            check_out=parse_clock(config.HOTEL_CHECK_OUT_TIME),
            hotel_event_minutes=config.HOTEL_EVENT_MINUTES,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Scheduler output
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScheduledAttraction:
    """An attraction packed into a sightseeing window; [start, end)."""
    attraction: Attraction
    window_name: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class TransitItem:
    route: TransitRoute
    kind = "transit"

    @property
    def start(self) -> datetime:
        return self.route.start_time

    @property
    def end(self) -> datetime:
        return self.route.end_time

    @property
    def title(self) -> str:
        return f"{self.route.start_location} → {self.route.end_location}"


@dataclass(frozen=True)
class AttractionItem:
    attraction: Attraction
    start: datetime
    end: datetime
    window_name: str = ""
    kind = "attraction"

    @property
    def title(self) -> str:
        return self.attraction.name


@dataclass(frozen=True)
class HotelItem:
    hotel: Hotel
    event: str                 # "check_in" | "check_out"
    start: datetime
    end: datetime
    kind = "hotel"

    @property
    def title(self) -> str:
        label = "Check-in" if self.event == "check_in" else "Check-out"
        return f"{label}: {self.hotel.name}"


@dataclass(frozen=True)
class MealItem:
    label: str
    start: datetime
    end: datetime
    kind = "meal"

    @property
    def title(self) -> str:
        return self.label.capitalize()


@dataclass(frozen=True)
class SleepItem:
    start: datetime
    end: datetime
    kind = "sleep"

    @property
    def title(self) -> str:
        return "Sleep"


TimelineItem = Union[TransitItem, AttractionItem, HotelItem, MealItem, SleepItem]


@dataclass(frozen=True)
class DaySchedule:
    """One day's chronologically ordered timeline."""
    day_number: int
    date: date
    items: tuple[TimelineItem, ...] = ()
    dropped: tuple[Attraction, ...] = ()     # overflow: did not fit either window


@dataclass(frozen=True)
class DayTaggedItem:
    day_number: int
    item: TimelineItem


@dataclass(frozen=True)
class TripTimeline:
    """
    Top-level output of the planner.

    ``items`` is the trip-wide stream, already in final display/export order.
    """
    trip_id: str
    window: TripWindow
    days: tuple[DaySchedule, ...] = ()
    items: tuple[DayTaggedItem, ...] = ()


@dataclass(frozen=True)
class TripSnapshot:
    """Immutable input set of one regeneration request."""
    window: TripWindow
    attractions: tuple[Attraction, ...] = ()
    hotels: Mapping[int, Optional[Hotel]] = field(default_factory=dict)     # day_number → hotel
    transit: Mapping[int, tuple[TransitRoute, ...]] = field(default_factory=dict)  # day_number → legs
