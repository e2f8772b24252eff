"""
main.py
--------
Command-line entry point for the trip timeline planner.

Reads a trip JSON file (the same body POST /v1/timeline/generate accepts),
generates the timeline and prints it day by day.

Run:
  python main.py --snapshot trip.json
  python main.py --snapshot trip.json --xml paris.xml
  python main.py --snapshot trip.json --json

Notes:
  - Transit legs are generated by the TransitTool unless the file carries a
    "transit" map.  Stub mode is the default (USE_STUB_TRANSIT=true).
  - Structured JSONL events go to LOGS_DIR (see config.py).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import config
from api.routes.timeline import TimelineRequest, serialize_timeline, snapshot_from_request
from modules.export.xml_exporter import export_timeline_xml
from modules.observability.logger import StructuredLogger
from modules.planning import TripScheduler
from schemas.timeline import TripTimeline

logger = logging.getLogger(__name__)


def _print_timeline(timeline: TripTimeline) -> None:
    window = timeline.window
    print(f"\n{'=' * 60}")
    print(f"  {window.home_city or 'Home'} → {window.destination_city or '?'}"
          f"   {window.start_date} .. {window.end_date}")
    print(f"  trip_id: {timeline.trip_id}")
    print(f"{'=' * 60}")

    for day in timeline.days:
        print(f"\n  Day {day.day_number}  ({day.date})")
        for item in day.items:
            print(f"    {item.start:%H:%M}-{item.end:%H:%M}  [{item.kind:<10}] {item.title}")
        for attraction in day.dropped:
            print(f"    (dropped) {attraction.name} — {attraction.estimated_duration_minutes} min")


def run(snapshot_path: Path, xml_path: Path | None = None, as_json: bool = False) -> TripTimeline:
    """Load, generate, and emit one timeline."""
    with open(snapshot_path, encoding="utf-8") as fh:
        req = TimelineRequest.model_validate(json.load(fh))

    snapshot = snapshot_from_request(req)
    event_log = StructuredLogger() if config.LOGS_DIR else None
    try:
        timeline = TripScheduler(event_log=event_log).generate(snapshot)
    finally:
        if event_log is not None:
            event_log.close()

    if as_json:
        print(json.dumps(serialize_timeline(timeline), indent=2, ensure_ascii=False))
    else:
        _print_timeline(timeline)

    if xml_path is not None:
        xml_path.write_text(export_timeline_xml(timeline), encoding="utf-8")
        logger.info("XML timeline written to %s", xml_path)

    return timeline


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a chronological trip timeline.")
    parser.add_argument("--snapshot", required=True, type=Path, help="Trip JSON file")
    parser.add_argument("--xml", type=Path, default=None, help="Also write the XML export here")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a text table")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run(args.snapshot, args.xml, args.json)
    except (OSError, ValueError) as exc:
        logger.error("Could not generate timeline: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
