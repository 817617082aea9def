import pytest

from rsvp_engine.dashboard.urls import DASHBOARD_REPORT_URL
from rsvp_engine.responses.dtos import ResponseSubmissionDTO


@pytest.mark.asyncio
async def test_dashboard_report(client, event, invite_store, response_store, link_resolver):
    invites = await invite_store.create_batch(event.id, 2, link_resolver)
    await response_store.submit(
        ResponseSubmissionDTO(
            event_id=event.id,
            guest_name="Amy",
            guest_email="amy@example.com",
            attendance="yes",
            guest_count=2,
            dietary_options=["vegan"],
            invite_id=invites[0].id,
        )
    )

    response = await client.get(DASHBOARD_REPORT_URL.format(event_id=event.id))

    assert response.status_code == 200
    data = response.json()
    assert data["event_id"] == event.id
    assert data["summary"]["total_invites"] == 2
    assert data["summary"]["total_guests"] == 2
    assert data["summary"]["response_rate"] == 50.0
    assert data["dietary"]["preferences"] == {"vegan": 2}
    assert [m["percentage"] for m in data["milestones"]] == [25, 50]


@pytest.mark.asyncio
async def test_dashboard_for_unknown_event(client):
    response = await client.get(DASHBOARD_REPORT_URL.format(event_id="evt_missing"))

    assert response.status_code == 404
