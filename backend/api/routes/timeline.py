"""
api/routes/timeline.py
-----------------------
POST /v1/timeline/generate
POST /v1/timeline/export

Both endpoints take the same body: the trip window, the ranked attraction
list, the hotel chosen for each night and, optionally, explicit transit legs
per day.  When ``transit`` is omitted the TransitTool generates the legs.

Every call is a full regeneration; nothing is stored between requests.
"""

from __future__ import annotations

import logging
from datetime import date as date_type, datetime
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from schemas.timeline import (
    Attraction,
    AttractionItem,
    Coordinates,
    DaySchedule,
    DayTaggedItem,
    Hotel,
    HotelItem,
    RouteType,
    TransitItem,
    TransitRoute,
    TransportMode,
    TripSnapshot,
    TripTimeline,
    TripWindow,
    parse_clock,
)
from modules.export.xml_exporter import export_filename, export_timeline_xml
from modules.planning import TripScheduler, build_snapshot
from modules.tool_usage.transit_tool import TransitTool
from modules.validation import (
    validate_day_number,
    validate_hotel,
    validate_transit_route,
    validate_trip_window,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class CoordinatesIn(BaseModel):
    latitude: float = 0.0
    longitude: float = 0.0


class AttractionIn(BaseModel):
    id: str
    name: str
    estimated_duration_minutes: int = Field(..., gt=0)
    category: str = ""
    coordinates: CoordinatesIn = Field(default_factory=CoordinatesIn)
    description: str = ""
    website_url: Optional[str] = None
    tips: list[str] = Field(default_factory=list)


class HotelIn(BaseModel):
    id: str
    name: str
    address: str = ""
    coordinates: CoordinatesIn = Field(default_factory=CoordinatesIn)
    rating: Optional[float] = None
    price_level: Optional[str] = None
    amenities: list[str] = Field(default_factory=list)


class TransitRouteIn(BaseModel):
    route_type: RouteType
    start_location: str
    end_location: str
    mode: TransportMode
    start_time: datetime
    end_time: datetime
    distance_km: float = Field(0.0, ge=0)
    cost: float = Field(0.0, ge=0)
    description: str = ""
    instructions: list[str] = Field(default_factory=list)


class TimelineRequest(BaseModel):
    start_date: str = Field(..., description="ISO-8601 date YYYY-MM-DD")
    end_date:   str = Field(..., description="ISO-8601 date YYYY-MM-DD")
    home_city:        str = ""
    destination_city: str = ""
    departure_time: Optional[str] = Field(None, description="HH:MM; defaults to DEFAULT_DEPARTURE_TIME")
    return_time:    Optional[str] = Field(None, description="HH:MM; defaults to DEFAULT_RETURN_TIME")
    attractions: list[AttractionIn] = Field(default_factory=list, description="Ranked, best first")
    hotels:  dict[int, Optional[HotelIn]] = Field(
        default_factory=dict, description="day_number → hotel for that night",
    )
    transit: Optional[dict[int, list[TransitRouteIn]]] = Field(
        None, description="day_number → legs; generated when omitted",
    )


# ── Request → domain ───────────────────────────────────────────────────────────

def _coords(c: CoordinatesIn) -> Coordinates:
    return Coordinates(latitude=c.latitude, longitude=c.longitude)


def _window(req: TimelineRequest) -> TripWindow:
    check = validate_trip_window({"start_date": req.start_date, "end_date": req.end_date})
    if not check.valid:
        raise ValueError("; ".join(check.errors))

    extra = {}
    if req.departure_time:
        extra["departure_time"] = parse_clock(req.departure_time)
    if req.return_time:
        extra["return_time"] = parse_clock(req.return_time)
    return TripWindow(
        start_date=date_type.fromisoformat(req.start_date),
        end_date=date_type.fromisoformat(req.end_date),
        home_city=req.home_city,
        destination_city=req.destination_city,
        **extra,
    )


def _hotels(req: TimelineRequest) -> dict[int, Optional[Hotel]]:
    hotels: dict[int, Optional[Hotel]] = {}
    for day_number, h in req.hotels.items():
        check = validate_day_number({"day_number": day_number})
        if not check.valid:
            raise ValueError("; ".join(check.errors))
        if h is None:
            hotels[day_number] = None
            continue
        check = validate_hotel(h.model_dump())
        if not check.valid:
            raise ValueError(f"hotel '{h.name}': " + "; ".join(check.errors))
        hotels[day_number] = Hotel(
            id=h.id,
            name=h.name,
            address=h.address,
            coordinates=_coords(h.coordinates),
            rating=h.rating,
            price_level=h.price_level,
            amenities=tuple(h.amenities),
        )
    return hotels


def _attractions(req: TimelineRequest) -> list[Attraction]:
    return [
        Attraction(
            id=a.id,
            name=a.name,
            estimated_duration_minutes=a.estimated_duration_minutes,
            category=a.category,
            coordinates=_coords(a.coordinates),
            description=a.description,
            website_url=a.website_url,
            tips=tuple(a.tips),
        )
        for a in req.attractions
    ]


def _transit(req: TimelineRequest, window: TripWindow) -> dict[int, tuple[TransitRoute, ...]]:
    transit: dict[int, tuple[TransitRoute, ...]] = {}
    for day_number, legs in (req.transit or {}).items():
        check = validate_day_number({"day_number": day_number})
        if not check.valid:
            raise ValueError("; ".join(check.errors))
        if day_number > window.number_of_days:
            raise ValueError(
                f"transit day_number={day_number} is past the last trip day ({window.number_of_days})"
            )
        routes = []
        for leg in legs:
            check = validate_transit_route(leg.model_dump())
            if not check.valid:
                raise ValueError(
                    f"transit leg {leg.start_location} → {leg.end_location}: " + "; ".join(check.errors)
                )
            routes.append(TransitRoute(
                route_type=leg.route_type,
                start_location=leg.start_location,
                end_location=leg.end_location,
                mode=leg.mode,
                start_time=leg.start_time,
                end_time=leg.end_time,
                distance_km=leg.distance_km,
                cost=leg.cost,
                description=leg.description,
                instructions=tuple(leg.instructions),
            ))
        transit[day_number] = tuple(routes)
    return transit


def snapshot_from_request(
    req: TimelineRequest,
    transit_tool: Optional[TransitTool] = None,
) -> TripSnapshot:
    """
    Convert a request body into a TripSnapshot.

    Raises ValueError for an invalid window, day number, hotel or transit leg.
    """
    window = _window(req)
    hotels = _hotels(req)
    attractions = _attractions(req)

    if req.transit is not None:
        snapshot = build_snapshot(window, attractions, hotels)
        return TripSnapshot(
            window=snapshot.window,
            attractions=snapshot.attractions,
            hotels=snapshot.hotels,
            transit=_transit(req, window),
        )

    tool = transit_tool or TransitTool()
    return build_snapshot(window, attractions, hotels, tool.routes_for_day)


# ── Serialisers ────────────────────────────────────────────────────────────────

def _ser_item(item) -> dict:
    data = {
        "kind":  item.kind,
        "title": item.title,
        "start": item.start.isoformat(),
        "end":   item.end.isoformat(),
    }
    if isinstance(item, TransitItem):
        data["route_type"] = item.route.route_type.value
        data["mode"] = item.route.mode.value
        data["distance_km"] = item.route.distance_km
        data["cost"] = item.route.cost
    elif isinstance(item, HotelItem):
        data["event"] = item.event
        data["hotel_id"] = item.hotel.id
    elif isinstance(item, AttractionItem):
        data["attraction_id"] = item.attraction.id
        data["window"] = item.window_name
    return data


def _ser_day(d: DaySchedule) -> dict:
    return {
        "day_number": d.day_number,
        "date":       d.date.isoformat(),
        "items":      [_ser_item(i) for i in d.items],
        "dropped":    [{"id": a.id, "name": a.name} for a in d.dropped],
    }


def _ser_tagged(entry: DayTaggedItem) -> dict:
    return {"day_number": entry.day_number, **_ser_item(entry.item)}


def serialize_timeline(timeline: TripTimeline) -> dict:
    window = timeline.window
    return {
        "trip_id":          timeline.trip_id,
        "home_city":        window.home_city,
        "destination_city": window.destination_city,
        "start_date":       window.start_date.isoformat(),
        "end_date":         window.end_date.isoformat(),
        "days":             [_ser_day(d) for d in timeline.days],
        "items":            [_ser_tagged(e) for e in timeline.items],
    }


def _generate(req: TimelineRequest) -> TripTimeline:
    try:
        snapshot = snapshot_from_request(req)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        return TripScheduler().generate(snapshot)
    except Exception as exc:
        logger.exception("Timeline generation failed")
        raise HTTPException(status_code=500, detail=f"Timeline generation failed: {exc}") from exc


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/generate", summary="Generate a chronological multi-day timeline")
def generate_timeline(req: TimelineRequest) -> dict:
    """
    Partitions the attractions across days, packs each day's morning and
    afternoon windows, and merges attractions with transit, meals, hotel
    events and sleep into one sorted timeline per day plus the trip-wide
    stream.  Attractions that fit neither window are listed under
    ``dropped`` for their day.
    """
    return serialize_timeline(_generate(req))


@router.post("/export", summary="Export the timeline as XML")
def export_timeline(req: TimelineRequest) -> Response:
    timeline = _generate(req)
    return Response(
        content=export_timeline_xml(timeline),
        media_type="application/xml",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(timeline.window)}"',
        },
    )
