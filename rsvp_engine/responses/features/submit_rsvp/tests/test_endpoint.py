import pytest

from rsvp_engine.responses.urls import EVENT_RSVPS_URL


@pytest.mark.asyncio
async def test_submit_rsvp(client, event):
    response = await client.post(
        EVENT_RSVPS_URL.format(event_id=event.id),
        json={
            "guest_name": "Amy",
            "guest_email": "amy@example.com",
            "attendance": "yes",
            "guest_count": "abc",
            "dietary_options": "vegan, halal",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["guest_count"] == 1
    assert data["dietary_options"] == ["vegan", "halal"]
    assert data["unmatched_invite"] is False


@pytest.mark.asyncio
async def test_resubmitting_for_invite_keeps_response_id(client, event, invite_store, link_resolver):
    invite = (await invite_store.create_batch(event.id, 1, link_resolver))[0]
    payload = {"guest_name": "Amy", "guest_email": "amy@example.com", "invite_id": invite.id}

    first = await client.post(EVENT_RSVPS_URL.format(event_id=event.id), json={**payload, "attendance": "maybe"})
    second = await client.post(EVENT_RSVPS_URL.format(event_id=event.id), json={**payload, "attendance": "yes"})

    assert second.json()["id"] == first.json()["id"]
    assert second.json()["attendance"] == "yes"


@pytest.mark.asyncio
async def test_unknown_attendance(client, event):
    response = await client.post(
        EVENT_RSVPS_URL.format(event_id=event.id),
        json={"guest_name": "Amy", "guest_email": "amy@example.com", "attendance": "perhaps"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "attendance"


@pytest.mark.asyncio
async def test_blank_email(client, event):
    response = await client.post(
        EVENT_RSVPS_URL.format(event_id=event.id),
        json={"guest_name": "Amy", "guest_email": "  ", "attendance": "yes"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "guest_email"


@pytest.mark.asyncio
async def test_unknown_event(client):
    response = await client.post(
        EVENT_RSVPS_URL.format(event_id="evt_missing"),
        json={"guest_name": "Amy", "guest_email": "amy@example.com", "attendance": "yes"},
    )

    assert response.status_code == 404
