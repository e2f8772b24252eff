"""
config.py
---------
Central configuration for the trip timeline planner.
All secrets loaded from environment variables — never hard-coded.

Clock windows use "HH:MM-HH:MM".  A window whose end is before its start
rolls over midnight (the overnight sleep window); equal bounds switch a
window off.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)

# ── Sightseeing windows ───────────────────────────────────────────────────────
MORNING_WINDOW: str   = os.getenv("MORNING_WINDOW",   "09:00-12:00")
AFTERNOON_WINDOW: str = os.getenv("AFTERNOON_WINDOW", "13:00-17:00")

# ── Fixed daily events ────────────────────────────────────────────────────────
BREAKFAST_WINDOW: str = os.getenv("BREAKFAST_WINDOW", "07:30-08:15")
LUNCH_WINDOW: str     = os.getenv("LUNCH_WINDOW",     "12:00-13:00")
DINNER_WINDOW: str    = os.getenv("DINNER_WINDOW",    "19:00-20:30")
SLEEP_WINDOW: str     = os.getenv("SLEEP_WINDOW",     "22:00-07:00")   # overnight

# ── Hotel ─────────────────────────────────────────────────────────────────────
HOTEL_CHECK_IN_TIME: str  = os.getenv("HOTEL_CHECK_IN_TIME",  "18:00")
HOTEL_CHECK_OUT_TIME: str = os.getenv("HOTEL_CHECK_OUT_TIME", "08:15")
HOTEL_EVENT_MINUTES: int  = int(os.getenv("HOTEL_EVENT_MINUTES", "30"))

# ── Trip defaults ─────────────────────────────────────────────────────────────
DEFAULT_DEPARTURE_TIME: str = os.getenv("DEFAULT_DEPARTURE_TIME", "08:00")
DEFAULT_RETURN_TIME: str    = os.getenv("DEFAULT_RETURN_TIME",    "18:00")
MAX_TRIP_DAYS: int          = int(os.getenv("MAX_TRIP_DAYS", "30"))

# ── Transit tool ──────────────────────────────────────────────────────────────
# Stub mode reproduces fixed-duration legs without any HTTP call.
# Set USE_STUB_TRANSIT=false and supply GOOGLE_ROUTES_API_KEY for live legs.
USE_STUB_TRANSIT: bool = os.getenv("USE_STUB_TRANSIT", "true").lower() in ("1", "true", "yes")

# Obtain at: https://console.cloud.google.com/apis/credentials  (enable Routes API)
GOOGLE_ROUTES_API_KEY: str = os.getenv("GOOGLE_ROUTES_API_KEY", "")
GOOGLE_ROUTES_URL: str     = os.getenv(
    "GOOGLE_ROUTES_URL",
    "https://routes.googleapis.com/directions/v2:computeRoutes",
)
# Timeout in seconds for all Routes HTTP calls
ROUTES_REQUEST_TIMEOUT: int = int(os.getenv("ROUTES_REQUEST_TIMEOUT", "15"))

# Per-km taxi fare used to price live legs (local currency)
TAXI_COST_PER_KM: float = float(os.getenv("TAXI_COST_PER_KM", "4.8"))

# ── Observability ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
# JSONL event logs; empty string disables the structured log
LOGS_DIR: str  = os.getenv("LOGS_DIR", str(Path(__file__).parent / "logs"))
