"""
Tests for booking endpoints: workflow, status changes, queries and error mapping.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from sports_events.db.base import utcnow


async def book(client: AsyncClient, user_id: int, event_id: int, **params):
    return await client.post("/api/bookings", params={"userId": user_id, "eventId": event_id, **params})


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, user, open_event):
    """Successful booking returns 200 and counts toward participants."""
    response = await book(client, user.id, open_event.id, notes="First time", emergencyContact="+91 98")
    assert response.status_code == 200
    data = response.json()
    assert data["user_id"] == user.id
    assert data["event_id"] == open_event.id
    assert data["booking_status"] == "CONFIRMED"
    assert data["payment_status"] == "PENDING"
    assert data["is_confirmed"] is False
    assert data["emergency_contact"] == "+91 98"
    assert float(data["total_amount"]) == 500.0

    event = (await client.get(f"/api/events/{open_event.id}")).json()
    assert event["current_participants"] == 1


@pytest.mark.asyncio
async def test_create_booking_unknown_user(client: AsyncClient, open_event):
    response = await book(client, 999, open_event.id)
    assert response.status_code == 404
    assert response.json() == {"detail": "User 999 not found", "code": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_create_booking_missing_params(client: AsyncClient):
    response = await client.post("/api/bookings", params={"userId": 1})
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_FAILED"


@pytest.mark.asyncio
async def test_duplicate_booking(client: AsyncClient, user, open_event):
    assert (await book(client, user.id, open_event.id)).status_code == 200

    response = await book(client, user.id, open_event.id)
    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_BOOKING"


@pytest.mark.asyncio
async def test_full_event(client: AsyncClient, user, other_user, single_slot_event):
    assert (await book(client, user.id, single_slot_event.id)).status_code == 200

    response = await book(client, other_user.id, single_slot_event.id)
    assert response.status_code == 400
    assert response.json()["code"] == "CAPACITY_EXCEEDED"


@pytest.mark.asyncio
async def test_cancel_then_rebook_scenario(client: AsyncClient, user, other_user, single_slot_event):
    first = (await book(client, user.id, single_slot_event.id)).json()
    assert (await book(client, other_user.id, single_slot_event.id)).status_code == 400

    response = await client.put(f"/api/bookings/{first['id']}/cancel")
    assert response.status_code == 200
    assert response.json()["booking_status"] == "CANCELLED"

    retry = await book(client, other_user.id, single_slot_event.id)
    assert retry.status_code == 200


@pytest.mark.asyncio
async def test_status_and_payment_updates(client: AsyncClient, user, open_event):
    booking = (await book(client, user.id, open_event.id)).json()

    response = await client.put(
        f"/api/bookings/{booking['id']}/payment",
        params={"paymentStatus": "COMPLETED", "paymentReference": "PAY123456789"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["payment_reference"] == "PAY123456789"
    assert data["is_confirmed"] is True

    response = await client.put(f"/api/bookings/{booking['id']}/status", params={"status": "ATTENDED"})
    assert response.status_code == 200
    assert response.json()["booking_status"] == "ATTENDED"


@pytest.mark.asyncio
async def test_invalid_status_transition(client: AsyncClient, user, open_event):
    booking = (await book(client, user.id, open_event.id)).json()
    await client.put(f"/api/bookings/{booking['id']}/cancel")

    response = await client.put(f"/api/bookings/{booking['id']}/status", params={"status": "CONFIRMED"})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATUS_TRANSITION"


@pytest.mark.asyncio
async def test_unknown_status_value(client: AsyncClient, user, open_event):
    booking = (await book(client, user.id, open_event.id)).json()
    response = await client.put(f"/api/bookings/{booking['id']}/status", params={"status": "LOST"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_booking_lookups(client: AsyncClient, user, other_user, open_event):
    mine = (await book(client, user.id, open_event.id)).json()
    await book(client, other_user.id, open_event.id)

    assert (await client.get(f"/api/bookings/{mine['id']}")).json()["id"] == mine["id"]
    assert (await client.get("/api/bookings/4040")).status_code == 404

    page = (await client.get(f"/api/bookings/user/{user.id}")).json()
    assert page["total"] == 1
    assert page["items"][0]["id"] == mine["id"]

    by_event = (await client.get(f"/api/bookings/event/{open_event.id}")).json()
    assert len(by_event) == 2

    pair = await client.get(f"/api/bookings/user/{user.id}/event/{open_event.id}")
    assert pair.status_code == 200
    assert pair.json()["id"] == mine["id"]

    upcoming = (await client.get(f"/api/bookings/user/{user.id}/upcoming")).json()
    assert [b["id"] for b in upcoming] == [mine["id"]]


@pytest.mark.asyncio
async def test_missing_user_event_pair_is_404(client: AsyncClient, user, open_event):
    response = await client.get(f"/api/bookings/user/{user.id}/event/{open_event.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_count_only_confirmed(client: AsyncClient, user, other_user, open_event):
    first = (await book(client, user.id, open_event.id)).json()
    await book(client, other_user.id, open_event.id)
    await client.put(f"/api/bookings/{first['id']}/cancel")

    response = await client.get(f"/api/bookings/event/{open_event.id}/count")
    assert response.json() == {"event_id": open_event.id, "confirmed_bookings": 1}


@pytest.mark.asyncio
async def test_stats(client: AsyncClient, user, other_user, open_event):
    first = (await book(client, user.id, open_event.id)).json()
    await book(client, other_user.id, open_event.id)
    await client.put(f"/api/bookings/{first['id']}/payment", params={"paymentStatus": "COMPLETED"})

    stats = (await client.get("/api/bookings/stats")).json()
    assert stats["total_bookings"] == 2
    assert stats["by_booking_status"] == {"CONFIRMED": 2}
    assert stats["by_payment_status"] == {"COMPLETED": 1, "PENDING": 1}


@pytest.mark.asyncio
async def test_recent_and_status_filters(client: AsyncClient, user, other_user, open_event):
    first = (await book(client, user.id, open_event.id)).json()
    await book(client, other_user.id, open_event.id)
    await client.put(f"/api/bookings/{first['id']}/payment", params={"paymentStatus": "FAILED"})

    recent = (await client.get("/api/bookings/recent", params={"daysBack": 1})).json()
    assert recent["total"] == 2

    failed = (await client.get("/api/bookings/payment-status/FAILED")).json()
    assert [b["id"] for b in failed] == [first["id"]]

    confirmed = (await client.get("/api/bookings/status/CONFIRMED")).json()
    assert len(confirmed) == 2


@pytest.mark.asyncio
async def test_starting_soon(client: AsyncClient, user, make_event):
    now = utcnow()
    soon = await make_event(title="Sprint", event_date=now + timedelta(days=2))
    later = await make_event(title="Ultra", event_date=now + timedelta(days=40))
    await book(client, user.id, soon.id)
    await book(client, user.id, later.id)

    response = await client.get("/api/bookings/starting-soon", params={"days": 7})
    assert [b["event_id"] for b in response.json()] == [soon.id]
