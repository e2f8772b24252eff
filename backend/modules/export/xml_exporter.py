"""
modules/export/xml_exporter.py
-------------------------------
Serialises a TripTimeline's flattened stream to XML.

Layout:
    <trip-timeline>
      <trip-info> origin/destination city, dates, departure/return time </trip-info>
      <timeline-events>
        <day number="1" date="YYYY-MM-DD">
          <event type="attraction" sequence="1"> <attraction>…</attraction> </event>
          …
        </day>
      </timeline-events>
    </trip-timeline>

The exporter walks TripTimeline.items in the order given and never re-sorts.
A new <day> element opens whenever the day tag changes, so a day can appear
twice if the stream interleaves days.  Times are HH:MM on the destination
clock.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from datetime import datetime

from schemas.timeline import (
    AttractionItem,
    HotelItem,
    MealItem,
    SleepItem,
    TimelineItem,
    TransitItem,
    TripTimeline,
    TripWindow,
)


def _hhmm(value: datetime) -> str:
    return value.strftime("%H:%M")


def _text(parent: ET.Element, tag: str, value: object) -> ET.Element:
    el = ET.SubElement(parent, tag)
    el.text = "" if value is None else str(value)
    return el


def _item_element(item: TimelineItem) -> ET.Element:
    if isinstance(item, TransitItem):
        el = ET.Element("transit-route")
        route = item.route
        _text(el, "type", route.route_type.value)
        _text(el, "from", route.start_location)
        _text(el, "to", route.end_location)
        _text(el, "mode", route.mode.value)
        _text(el, "start-time", _hhmm(item.start))
        _text(el, "end-time", _hhmm(item.end))
        _text(el, "distance-km", f"{route.distance_km:.1f}")
        _text(el, "cost", f"{route.cost:.2f}")
        return el

    if isinstance(item, AttractionItem):
        el = ET.Element("attraction")
        _text(el, "name", item.attraction.name)
        _text(el, "category", item.attraction.category)
        _text(el, "window", item.window_name)
        _text(el, "start-time", _hhmm(item.start))
        _text(el, "end-time", _hhmm(item.end))
        return el

    if isinstance(item, HotelItem):
        el = ET.Element("hotel", event=item.event)
        _text(el, "name", item.hotel.name)
        _text(el, "address", item.hotel.address)
        tag = "checkin-time" if item.event == "check_in" else "checkout-time"
        _text(el, tag, _hhmm(item.start))
        return el

    if isinstance(item, MealItem):
        el = ET.Element("meal")
        _text(el, "type", item.title)
        _text(el, "start-time", _hhmm(item.start))
        _text(el, "end-time", _hhmm(item.end))
        return el

    if isinstance(item, SleepItem):
        el = ET.Element("sleep")
        _text(el, "start-time", _hhmm(item.start))
        _text(el, "end-time", _hhmm(item.end))
        return el

    raise TypeError(f"Unsupported timeline item: {type(item).__name__}")


def build_timeline_element(timeline: TripTimeline) -> ET.Element:
    window = timeline.window
    root = ET.Element("trip-timeline", id=timeline.trip_id)

    info = ET.SubElement(root, "trip-info")
    _text(info, "origin-city", window.home_city)
    _text(info, "destination-city", window.destination_city)
    _text(info, "start-date", window.start_date.isoformat())
    _text(info, "end-date", window.end_date.isoformat())
    _text(info, "start-time", window.departure_time.strftime("%H:%M"))
    _text(info, "end-time", window.return_time.strftime("%H:%M"))

    events = ET.SubElement(root, "timeline-events")
    day_el = None
    current_day = None
    sequence = 0
    for entry in timeline.items:
        if entry.day_number != current_day:
            current_day = entry.day_number
            day_el = ET.SubElement(
                events,
                "day",
                number=str(entry.day_number),
                date=window.date_for_day(entry.day_number).isoformat(),
            )
        sequence += 1
        event = ET.SubElement(day_el, "event", type=entry.item.kind, sequence=str(sequence))
        event.append(_item_element(entry.item))

    return root


def export_timeline_xml(timeline: TripTimeline) -> str:
    """Return the timeline as an indented UTF-8 XML document string."""
    root = build_timeline_element(timeline)
    ET.indent(root, space="  ")
    body = ET.tostring(root, encoding="unicode")
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"


def _slug(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "trip"


def export_filename(window: TripWindow) -> str:
    """e.g. ``"london-to-paris-timeline.xml"``."""
    return f"{_slug(window.home_city)}-to-{_slug(window.destination_city)}-timeline.xml"
