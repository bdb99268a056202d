"""
Tests for category endpoints, including cached reads staying fresh after writes.
"""

import asyncio

import pytest
from httpx import AsyncClient

from sports_events.models import EventStatus


@pytest.mark.asyncio
async def test_create_category(client: AsyncClient):
    response = await client.post("/api/categories", json={"name": "  Cycling ", "description": "Road and track"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Cycling"
    assert data["id"] > 0


@pytest.mark.asyncio
async def test_duplicate_category_name(client: AsyncClient, category):
    response = await client.post("/api/categories", json={"name": category.name})
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_CATEGORY"


@pytest.mark.asyncio
async def test_concurrent_creates_with_same_name(client: AsyncClient):
    """Both requests may pass the name check; the loser still gets a 400, never a 500."""
    responses = await asyncio.gather(
        client.post("/api/categories", json={"name": "Swimming"}),
        client.post("/api/categories", json={"name": "Swimming"}),
    )

    assert sorted(r.status_code for r in responses) == [201, 400]
    rejected = next(r for r in responses if r.status_code == 400)
    assert rejected.json()["code"] == "DUPLICATE_CATEGORY"
    assert [c["name"] for c in (await client.get("/api/categories")).json()] == ["Swimming"]


@pytest.mark.asyncio
async def test_blank_name_rejected(client: AsyncClient):
    response = await client.post("/api/categories", json={"name": "   "})
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_FAILED"


@pytest.mark.asyncio
async def test_get_by_id_and_name(client: AsyncClient, category):
    assert (await client.get(f"/api/categories/{category.id}")).json()["name"] == "Running"
    assert (await client.get("/api/categories/name/Running")).json()["id"] == category.id

    missing = await client.get("/api/categories/name/Curling")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Category Curling not found"


@pytest.mark.asyncio
async def test_list_is_fresh_after_create(client: AsyncClient, category):
    assert [c["name"] for c in (await client.get("/api/categories")).json()] == ["Running"]

    await client.post("/api/categories", json={"name": "Swimming"})

    names = [c["name"] for c in (await client.get("/api/categories")).json()]
    assert names == ["Running", "Swimming"]


@pytest.mark.asyncio
async def test_cached_miss_is_fresh_after_create(client: AsyncClient):
    assert (await client.get("/api/categories/name/Tennis")).status_code == 404

    await client.post("/api/categories", json={"name": "Tennis"})

    assert (await client.get("/api/categories/name/Tennis")).status_code == 200


@pytest.mark.asyncio
async def test_update_category(client: AsyncClient, category):
    await client.get(f"/api/categories/{category.id}")

    response = await client.put(f"/api/categories/{category.id}", json={"name": "Road Running"})
    assert response.status_code == 200
    assert response.json()["description"] == "Running and marathon events"

    assert (await client.get(f"/api/categories/{category.id}")).json()["name"] == "Road Running"


@pytest.mark.asyncio
async def test_update_to_existing_name(client: AsyncClient, category):
    other = (await client.post("/api/categories", json={"name": "Football"})).json()
    response = await client.put(f"/api/categories/{other['id']}", json={"name": "Running"})
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_CATEGORY"


@pytest.mark.asyncio
async def test_with_events_tracks_event_writes(client: AsyncClient, category, make_event):
    assert (await client.get("/api/categories/with-events")).json() == []

    event = await make_event(status=EventStatus.INACTIVE)
    await client.put(f"/api/events/{event.id}", json={"status": "ACTIVE"})

    names = [c["name"] for c in (await client.get("/api/categories/with-events")).json()]
    assert names == ["Running"]


@pytest.mark.asyncio
async def test_delete_category(client: AsyncClient, category):
    assert (await client.delete(f"/api/categories/{category.id}")).status_code == 204
    assert (await client.get(f"/api/categories/{category.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_category_with_events(client: AsyncClient, user, category, open_event):
    await client.post("/api/bookings", params={"userId": user.id, "eventId": open_event.id})

    response = await client.delete(f"/api/categories/{category.id}")
    assert response.status_code == 400
    assert response.json()["code"] == "HAS_DEPENDENTS"
    assert (await client.get(f"/api/events/{open_event.id}")).status_code == 200

    response = await client.delete(f"/api/categories/{category.id}", params={"cascade": True})
    assert response.status_code == 204
    assert (await client.get(f"/api/events/{open_event.id}")).status_code == 404
    assert (await client.get(f"/api/bookings/event/{open_event.id}/count")).json()["confirmed_bookings"] == 0
