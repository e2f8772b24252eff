"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET  /v1/health
    POST /v1/timeline/generate
    POST /v1/timeline/export
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.routes import health, timeline

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Trip Timeline Planner API",
    version="1.0.0",
    description=(
        "Builds chronological day-by-day trip timelines: attractions packed into "
        "morning and afternoon windows, merged with transit, meals, hotel events and sleep."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow the frontend (any origin during development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router,    prefix="/v1",          tags=["Health"])
app.include_router(timeline.router,  prefix="/v1/timeline", tags=["Timeline"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=True)
