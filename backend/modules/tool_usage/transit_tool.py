"""
modules/tool_usage/transit_tool.py
-----------------------------------
Generates the transit legs of one trip day.  Runs before the planner; the
planner only consumes its output.

Legs per day:
  day 1          Home → Hub (flight at TripWindow.departure_time)
  day 1 + hotel  Hub → Hotel (taxi once the flight lands)
  hotel + stops  Hotel → First Attraction (arrives as the morning window opens)
  hotel + stops  Last Attraction → Hotel (leaves as the afternoon window closes)
  last day       Hotel → Home (flight at TripWindow.return_time)

Stub mode  (USE_STUB_TRANSIT=true)  — fixed durations, distances and fares.
Live mode  (USE_STUB_TRANSIT=false) — intra-city legs priced from Google Routes:
    POST https://routes.googleapis.com/directions/v2:computeRoutes
    Headers:
        X-Goog-Api-Key:   {GOOGLE_ROUTES_API_KEY}
        X-Goog-FieldMask: routes.duration,routes.distanceMeters
    routes[0].duration       → "Ns"
    routes[0].distanceMeters → int
  Flights have no coordinates to route and always use the fixed estimates.

Any live failure raises TransitUnavailableError; the trip scheduler treats
that as "no transit today" rather than failing the trip.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Mapping, Optional, Sequence

import requests

import config
from schemas.timeline import (
    Attraction,
    Coordinates,
    DayClock,
    Hotel,
    RouteType,
    TransitRoute,
    TransportMode,
    TripWindow,
)

logger = logging.getLogger(__name__)

# (duration minutes, distance km, cost)
_FLIGHT_ESTIMATE = (120, 500.0, 150.0)
_AIRPORT_TAXI_ESTIMATE = (30, 25.0, 35.0)
_CITY_TAXI_ESTIMATE = (15, 2.5, 12.0)


class TransitUnavailableError(RuntimeError):
    """Raised when transit legs for a day cannot be generated."""


def recommended_mode(route_type: RouteType, distance_km: float) -> TransportMode:
    """Travel mode suggestion by leg type and distance."""
    if route_type in (RouteType.HOME_TO_HUB, RouteType.HOTEL_TO_HOME):
        return TransportMode.AIRPLANE
    if route_type == RouteType.HUB_TO_HOTEL:
        return TransportMode.TAXI
    if distance_km < 1.0:
        return TransportMode.WALKING
    if distance_km < 5.0:
        return TransportMode.CYCLING
    return TransportMode.TAXI


def _parse_duration_s(value: str) -> int:
    """
    Parse Google Routes duration string to integer seconds.
    Format: "123s" or "123.456s"
    """
    return int(float(value.strip().rstrip("s")))


# ─────────────────────────────────────────────────────────────────────────────
# TransitTool
# ─────────────────────────────────────────────────────────────────────────────

class TransitTool:
    """Builds TransitRoute legs for a single trip day."""

    def __init__(
        self,
        clock: Optional[DayClock] = None,
        use_stub: Optional[bool] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.clock = clock or DayClock.from_config()
        self.use_stub = config.USE_STUB_TRANSIT if use_stub is None else use_stub
        self._session = session or requests.Session()

    def routes_for_day(
        self,
        window: TripWindow,
        day_number: int,
        hotels: Mapping[int, Optional[Hotel]],
        bucket: Sequence[Attraction],
    ) -> list[TransitRoute]:
        """
        Return the day's legs in generation order.

        ``bucket`` is the day's attraction bucket; the first and last entries
        anchor the hotel ↔ attraction legs.
        """
        day = window.date_for_day(day_number)
        tonight = hotels.get(day_number)
        last_night = hotels.get(day_number - 1) if day_number > 1 else None
        routes: list[TransitRoute] = []

        if day_number == 1:
            flight = self._flight(
                RouteType.HOME_TO_HUB,
                window.home_city or "Home",
                f"{window.destination_city} Airport".strip(),
                datetime.combine(day, window.departure_time),
                description=f"Flight from {window.home_city} to {window.destination_city}",
            )
            routes.append(flight)
            if tonight is not None:
                routes.append(self._airport_transfer(window, tonight, flight.end_time))

        morning_hotel = last_night or tonight
        if morning_hotel is not None and bucket:
            first = bucket[0]
            depart = datetime.combine(day, self.clock.morning.start)
            routes.append(self._city_leg(
                RouteType.HOTEL_TO_FIRST_ATTRACTION,
                origin=(morning_hotel.name, morning_hotel.coordinates),
                destination=(first.name, first.coordinates),
                anchor=depart,
                anchor_is_arrival=True,
            ))

        evening_hotel = tonight or last_night
        if evening_hotel is not None and bucket:
            last = bucket[-1]
            depart = datetime.combine(day, self.clock.afternoon.end)
            routes.append(self._city_leg(
                RouteType.LAST_ATTRACTION_TO_HOTEL,
                origin=(last.name, last.coordinates),
                destination=(evening_hotel.name, evening_hotel.coordinates),
                anchor=depart,
                anchor_is_arrival=False,
            ))

        if day_number == window.number_of_days:
            origin = evening_hotel.name if evening_hotel is not None else window.destination_city
            routes.append(self._flight(
                RouteType.HOTEL_TO_HOME,
                origin,
                window.home_city or "Home",
                datetime.combine(day, window.return_time),
                description=f"Flight from {origin} to {window.home_city}",
            ))

        logger.debug("Day %d: generated %d transit leg(s)", day_number, len(routes))
        return routes

    # ── leg builders ──────────────────────────────────────────────────────

    @staticmethod
    def _flight(
        route_type: RouteType,
        origin: str,
        destination: str,
        depart: datetime,
        description: str,
    ) -> TransitRoute:
        minutes, km, cost = _FLIGHT_ESTIMATE
        return TransitRoute(
            route_type=route_type,
            start_location=origin,
            end_location=destination,
            mode=recommended_mode(route_type, km),
            start_time=depart,
            end_time=depart + timedelta(minutes=minutes),
            distance_km=km,
            cost=cost,
            description=description,
            instructions=(
                "Arrive at the airport 2 hours before departure",
                "Have passport and boarding pass ready",
            ),
        )

    @staticmethod
    def _airport_transfer(window: TripWindow, hotel: Hotel, landed: datetime) -> TransitRoute:
        minutes, km, cost = _AIRPORT_TAXI_ESTIMATE
        return TransitRoute(
            route_type=RouteType.HUB_TO_HOTEL,
            start_location=f"{window.destination_city} Airport".strip(),
            end_location=hotel.name,
            mode=recommended_mode(RouteType.HUB_TO_HOTEL, km),
            start_time=landed,
            end_time=landed + timedelta(minutes=minutes),
            distance_km=km,
            cost=cost,
            description=f"Taxi from the airport to {hotel.name}",
            instructions=("Follow airport taxi signs", "Have the hotel address ready"),
        )

    def _city_leg(
        self,
        route_type: RouteType,
        origin: tuple[str, Coordinates],
        destination: tuple[str, Coordinates],
        anchor: datetime,
        anchor_is_arrival: bool,
    ) -> TransitRoute:
        if self.use_stub:
            minutes, km, cost = _CITY_TAXI_ESTIMATE
            seconds = minutes * 60
            mode = TransportMode.TAXI
        else:
            seconds, km = self._compute_route(origin[1], destination[1])
            cost = round(km * config.TAXI_COST_PER_KM, 2)
            mode = recommended_mode(route_type, km)

        travel = timedelta(seconds=seconds)
        start = anchor - travel if anchor_is_arrival else anchor
        return TransitRoute(
            route_type=route_type,
            start_location=origin[0],
            end_location=destination[0],
            mode=mode,
            start_time=start,
            end_time=start + travel,
            distance_km=km,
            cost=cost,
            description=f"{mode.value} from {origin[0]} to {destination[0]}",
        )

    # ── live API ──────────────────────────────────────────────────────────

    def _compute_route(self, origin: Coordinates, destination: Coordinates) -> tuple[int, float]:
        """Return (duration seconds, distance km) of the driving route."""
        if not config.GOOGLE_ROUTES_API_KEY:
            raise TransitUnavailableError("GOOGLE_ROUTES_API_KEY is not set")

        body = {
            "origin": {"location": {"latLng": {
                "latitude": origin.latitude, "longitude": origin.longitude}}},
            "destination": {"location": {"latLng": {
                "latitude": destination.latitude, "longitude": destination.longitude}}},
            "travelMode": "DRIVE",
        }
        headers = {
            "X-Goog-Api-Key": config.GOOGLE_ROUTES_API_KEY,
            "X-Goog-FieldMask": "routes.duration,routes.distanceMeters",
            "Content-Type": "application/json",
        }
        try:
            resp = self._session.post(
                config.GOOGLE_ROUTES_URL,
                json=body,
                headers=headers,
                timeout=config.ROUTES_REQUEST_TIMEOUT,
            )
            resp.raise_for_status()
            route = resp.json()["routes"][0]
            return _parse_duration_s(route["duration"]), route.get("distanceMeters", 0) / 1000.0
        except requests.RequestException as exc:
            raise TransitUnavailableError(f"Routes API request failed: {exc}") from exc
        except (KeyError, IndexError, ValueError) as exc:
            raise TransitUnavailableError(f"Unexpected Routes API response: {exc}") from exc
