"""
Tests for venue endpoints.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from sports_events.db.base import utcnow
from sports_events.models import Event, EventType, Venue


async def add_venue(client: AsyncClient, **fields) -> dict:
    payload = {"name": "Palace Grounds", "address": "Jayamahal, Bangalore", "city": "Bangalore", "capacity": 10000}
    payload.update(fields)
    response = await client.post("/api/venues", json=payload)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_venue(client: AsyncClient):
    data = await add_venue(client, latitude=12.998, longitude=77.592)
    assert data["name"] == "Palace Grounds"
    assert data["latitude"] == 12.998


@pytest.mark.asyncio
async def test_create_venue_requires_address(client: AsyncClient):
    response = await client.post("/api/venues", json={"name": "Nowhere", "city": "Mysore"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_coordinates(client: AsyncClient):
    response = await client.post(
        "/api/venues",
        json={"name": "Pole", "address": "North", "city": "Arctic", "latitude": 91},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_and_lookups(client: AsyncClient, venue):
    await add_venue(client, name="Chamundi Hill Track", address="Chamundi Hill", city="Mysore", capacity=500)

    page = (await client.get("/api/venues", params={"sortBy": "name"})).json()
    assert page["total"] == 2
    assert [v["name"] for v in page["items"]] == ["Chamundi Hill Track", "Kanteerava Stadium"]

    assert (await client.get("/api/venues/cities")).json() == ["Bangalore", "Mysore"]
    assert [v["name"] for v in (await client.get("/api/venues/city/Mysore")).json()] == ["Chamundi Hill Track"]
    assert [v["id"] for v in (await client.get("/api/venues/capacity/1000")).json()] == [venue.id]
    assert (await client.get("/api/venues/name/Kanteerava Stadium")).json()["id"] == venue.id
    assert (await client.get("/api/venues/999")).status_code == 404


@pytest.mark.asyncio
async def test_search(client: AsyncClient, venue):
    page = (await client.get("/api/venues/search", params={"q": "kanteerava"})).json()
    assert [v["id"] for v in page["items"]] == [venue.id]

    page = (await client.get("/api/venues/search", params={"q": "wembley"})).json()
    assert page["total"] == 0


@pytest.mark.asyncio
async def test_update_keeps_required_fields(client: AsyncClient, venue):
    await client.get(f"/api/venues/{venue.id}")

    response = await client.put(f"/api/venues/{venue.id}", json={"name": None, "capacity": 9000})
    assert response.status_code == 200
    assert response.json()["name"] == "Kanteerava Stadium"

    assert (await client.get(f"/api/venues/{venue.id}")).json()["capacity"] == 9000


@pytest.mark.asyncio
async def test_with_events_lists_upcoming_hosts(client: AsyncClient, category, venue):
    await add_venue(client)
    assert (await client.get("/api/venues/with-events")).json() == []

    now = utcnow()
    response = await client.post(
        "/api/events",
        json={
            "title": "Kanteerava Relay",
            "event_date": (now + timedelta(days=9)).isoformat(),
            "registration_start_date": now.isoformat(),
            "registration_end_date": (now + timedelta(days=8)).isoformat(),
            "event_type": "ATHLETICS",
            "category_id": category.id,
            "venue_id": venue.id,
        },
    )
    assert response.status_code == 201

    assert [v["id"] for v in (await client.get("/api/venues/with-events")).json()] == [venue.id]


@pytest.mark.asyncio
async def test_cascade_delete_leaves_other_venues(client: AsyncClient, db_session, category, venue, user, open_event):
    other = await add_venue(client)
    other_event = Event(
        title="Palace Grounds 5K",
        event_date=utcnow() + timedelta(days=15),
        registration_start_date=utcnow() - timedelta(days=1),
        registration_end_date=utcnow() + timedelta(days=5),
        event_type=EventType.RUNNING,
        category_id=category.id,
        venue_id=other["id"],
    )
    db_session.add(other_event)
    await db_session.commit()

    await client.post("/api/bookings", params={"userId": user.id, "eventId": open_event.id})
    await client.post("/api/bookings", params={"userId": user.id, "eventId": other_event.id})

    assert (await client.delete(f"/api/venues/{venue.id}")).status_code == 400
    assert (await client.delete(f"/api/venues/{venue.id}", params={"cascade": True})).status_code == 204

    assert (await client.get(f"/api/venues/{venue.id}")).status_code == 404
    assert (await client.get(f"/api/events/{open_event.id}")).status_code == 404
    assert (await client.get(f"/api/events/{other_event.id}")).status_code == 200

    remaining = (await client.get(f"/api/bookings/user/{user.id}")).json()
    assert [b["event_id"] for b in remaining["items"]] == [other_event.id]

    assert await db_session.get(Venue, other["id"]) is not None
