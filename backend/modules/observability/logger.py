"""
Structured JSON event log — append-only, one object per line (.jsonl).

Usage:
    from modules.observability.logger import StructuredLogger

    events = StructuredLogger()
    events.log("trip_abc123", "timeline_generated", {"days": 3})

Records go to  <LOGS_DIR>/<trip_id>.jsonl  (config.LOGS_DIR).
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

import config


class StructuredLogger:
    """Thread-safe, append-only JSONL logger keyed by trip id."""

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self._logs_dir = Path(logs_dir or config.LOGS_DIR)
        self._lock = threading.Lock()
        self._handles: dict[str, IO[str]] = {}  # trip_id -> file handle

    # ── public API ────────────────────────────────────────────────────────

    @property
    def logs_dir(self) -> Path:
        return self._logs_dir

    def log(self, trip_id: str, event_type: str, payload: dict) -> None:
        """Append one structured JSON record to ``<trip_id>.jsonl``."""
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "trip_id": trip_id,
            "event_type": event_type,
            "payload": payload,
        }
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"

        with self._lock:
            fh = self._handles.get(trip_id)
            if fh is None:
                fh = self._open(trip_id)
            fh.write(line)
            fh.flush()

    def close(self, trip_id: str | None = None) -> None:
        """Close one or all open file handles."""
        with self._lock:
            if trip_id:
                fh = self._handles.pop(trip_id, None)
                if fh:
                    fh.close()
            else:
                for fh in self._handles.values():
                    fh.close()
                self._handles.clear()

    # ── internals ─────────────────────────────────────────────────────────

    def _open(self, trip_id: str) -> IO[str]:
        os.makedirs(self._logs_dir, exist_ok=True)
        path = self._logs_dir / f"{trip_id}.jsonl"
        fh = open(path, "a", encoding="utf-8")  # noqa: SIM115
        self._handles[trip_id] = fh
        return fh
