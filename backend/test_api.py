"""
test_api.py
-----------
HTTP surface via FastAPI's TestClient (no server, stub transit).
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.server import app


@pytest.fixture
def client():
    return TestClient(app)


def _body(**overrides):
    body = {
        "start_date": "2026-03-02",
        "end_date": "2026-03-04",
        "home_city": "London",
        "destination_city": "Paris",
        "attractions": [
            {"id": "louvre", "name": "Louvre", "estimated_duration_minutes": 180, "category": "museum",
             "coordinates": {"latitude": 48.8606, "longitude": 2.3376}},
            {"id": "orsay", "name": "Musée d'Orsay", "estimated_duration_minutes": 120},
            {"id": "tower", "name": "Eiffel Tower", "estimated_duration_minutes": 90},
            {"id": "sacre", "name": "Sacré-Cœur", "estimated_duration_minutes": 60},
            {"id": "catacombs", "name": "Catacombs", "estimated_duration_minutes": 300},
        ],
        "hotels": {
            "1": {"id": "marais", "name": "Hôtel Le Marais", "rating": 4.3},
            "2": {"id": "marais", "name": "Hôtel Le Marais", "rating": 4.3},
        },
    }
    body.update(overrides)
    return body


def test_health(client):
    resp = client.get("/v1/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_generate(client):
    resp = client.post("/v1/timeline/generate", json=_body())
    assert resp.status_code == 200, resp.text
    data = resp.json()

    assert data["trip_id"].startswith("trip_")
    assert [d["day_number"] for d in data["days"]] == [1, 2, 3]
    assert len(data["items"]) == sum(len(d["items"]) for d in data["days"])

    starts = [i["start"] for i in data["items"]]
    assert starts == sorted(starts)

    kinds = {i["kind"] for i in data["items"]}
    assert kinds == {"transit", "attraction", "meal", "hotel", "sleep"}

    dropped = [a["id"] for d in data["days"] for a in d["dropped"]]
    assert dropped == ["catacombs"], "300 min fits neither window"


def test_generate_is_repeatable(client):
    first = client.post("/v1/timeline/generate", json=_body()).json()
    second = client.post("/v1/timeline/generate", json=_body()).json()
    assert first == second


def test_explicit_transit_replaces_generated(client):
    transit = {
        "1": [{
            "route_type": "Home to Hub",
            "start_location": "London",
            "end_location": "Paris Gare du Nord",
            "mode": "Train",
            "start_time": "2026-03-02T06:30:00",
            "end_time": "2026-03-02T08:50:00",
        }],
    }
    resp = client.post("/v1/timeline/generate", json=_body(transit=transit))
    assert resp.status_code == 200, resp.text
    legs = [i for i in resp.json()["items"] if i["kind"] == "transit"]
    assert len(legs) == 1
    assert legs[0]["mode"] == "Train"
    assert legs[0]["day_number"] == 1


def test_inverted_dates_rejected(client):
    resp = client.post("/v1/timeline/generate", json=_body(start_date="2026-03-04", end_date="2026-03-02"))
    assert resp.status_code == 422


def test_bad_date_format_rejected(client):
    resp = client.post("/v1/timeline/generate", json=_body(start_date="March 2nd"))
    assert resp.status_code == 422


def test_non_positive_duration_rejected(client):
    body = _body()
    body["attractions"][0]["estimated_duration_minutes"] = 0
    assert client.post("/v1/timeline/generate", json=body).status_code == 422


def test_bad_hotel_rejected(client):
    body = _body()
    body["hotels"]["1"]["rating"] = 9
    assert client.post("/v1/timeline/generate", json=body).status_code == 422


def test_export(client):
    resp = client.post("/v1/timeline/export", json=_body())
    assert resp.status_code == 200, resp.text
    assert resp.headers["content-type"].startswith("application/xml")
    assert 'filename="london-to-paris-timeline.xml"' in resp.headers["content-disposition"]
    assert "<trip-timeline" in resp.text
    assert "<destination-city>Paris</destination-city>" in resp.text


def _leg(start="2026-03-02T06:30:00", end="2026-03-02T08:50:00"):
    return {
        "route_type": "Home to Hub",
        "start_location": "London",
        "end_location": "Paris Gare du Nord",
        "mode": "Train",
        "start_time": start,
        "end_time": end,
    }


def test_transit_past_last_day_rejected(client):
    resp = client.post("/v1/timeline/generate", json=_body(transit={"5": [_leg()]}))
    assert resp.status_code == 422, "legs for day 5 of a 3-day trip would never be scheduled"
    assert "past the last trip day" in resp.text


def test_transit_day_zero_rejected(client):
    resp = client.post("/v1/timeline/generate", json=_body(transit={"0": [_leg()]}))
    assert resp.status_code == 422
    assert "day_number=0" in resp.text


def test_transit_leg_ending_before_start_rejected(client):
    leg = _leg(start="2026-03-02T09:00:00", end="2026-03-02T08:00:00")
    resp = client.post("/v1/timeline/generate", json=_body(transit={"1": [leg]}))
    assert resp.status_code == 422
    assert "before start_time" in resp.text
