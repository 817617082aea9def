from datetime import UTC, date, datetime, time, timedelta

import pytest

from rsvp_engine.core.enums import Attendance, HostingMethod, InviteStatus
from rsvp_engine.dashboard.aggregator import build_event_overview, build_report, round_rate, sort_overviews
from rsvp_engine.events.dtos import Event
from rsvp_engine.invites.dtos import Invite
from rsvp_engine.responses.dtos import Response

START = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)
NOW = datetime(2026, 5, 20, 9, 0, tzinfo=UTC)


def make_event(**overrides) -> Event:
    values = {
        "id": "evt_1",
        "name": "Summer Party",
        "date": date(2026, 6, 1),
        "created_at": START,
    }
    values.update(overrides)
    return Event(**values)


def make_invite(n: int, status=InviteStatus.ACTIVE, created_at=START) -> Invite:
    return Invite(
        id=f"inv_{n:03d}",
        event_id="evt_1",
        rsvp_url=f"http://test/rsvp/evt_1/inv_{n:03d}",
        hosting_method=HostingMethod.LOCAL,
        status=status,
        created_at=created_at,
    )


def make_response(n: int, attendance="yes", guest_count=1, submitted_at=None, **overrides) -> Response:
    values = {
        "id": f"rsp_{n:03d}",
        "event_id": "evt_1",
        "guest_name": f"Guest {n}",
        "guest_email": f"guest{n}@example.com",
        "attendance": attendance,
        "guest_count": guest_count,
        "submitted_at": submitted_at or START + timedelta(days=n),
    }
    values.update(overrides)
    return Response(**values)


def test_single_attending_response_with_dietary_option():
    report = build_report(
        make_event(),
        [make_invite(1)],
        [make_response(1, guest_count=2, dietary_options=["vegan"], invite_id="inv_001")],
        now=NOW,
    )

    assert report.summary.total_responses == 1
    assert report.summary.attending == 1
    assert report.summary.total_guests == 2
    assert report.summary.response_rate == 100.0
    assert report.dietary.preferences["vegan"] == 2
    assert report.dietary.total_with_dietary == 1


def test_not_attending_guest_count_does_not_change_totals():
    responses = [make_response(1, guest_count=2), make_response(2, attendance="no", guest_count=5)]

    report = build_report(make_event(), [make_invite(1), make_invite(2)], responses, now=NOW)

    assert report.summary.total_guests == 2
    assert report.summary.not_attending == 1
    assert report.insights.attendance_rate == 50.0
    assert report.insights.average_guests_per_response == 2.0


def test_empty_event():
    report = build_report(make_event(), [], [], now=NOW)

    assert report.summary.total_invites == 0
    assert report.summary.response_rate == 0.0
    assert report.milestones == []
    assert report.trends == {}
    assert report.insights.attendance_rate == 0.0
    assert report.insights.average_response_time == 0.0
    assert report.insights.peak_response_day is None
    assert report.insights.days_until_event == 11


def test_response_rate_is_clamped_to_one_hundred():
    responses = [make_response(n) for n in range(1, 4)]

    report = build_report(make_event(), [make_invite(1)], responses, now=NOW)

    assert report.summary.response_rate == 100.0
    assert report.summary.pending_responses == 0


def test_deactivated_invites_count_only_when_answered():
    invites = [
        make_invite(1),
        make_invite(2, status=InviteStatus.DEACTIVATED),
        make_invite(3, status=InviteStatus.DEACTIVATED),
    ]
    responses = [make_response(1, invite_id="inv_002")]

    report = build_report(make_event(), invites, responses, now=NOW)

    assert report.summary.total_invites == 2
    assert report.summary.active_invites == 1
    assert report.summary.deactivated_invites == 2
    assert report.summary.response_rate == 50.0


def test_trends_are_bucketed_by_event_timezone():
    # 23:30 UTC is already the next day in Madrid
    late = datetime(2026, 5, 3, 23, 30, tzinfo=UTC)
    responses = [
        make_response(1, submitted_at=late),
        make_response(2, attendance="maybe", submitted_at=late + timedelta(hours=1)),
    ]

    report = build_report(make_event(timezone="Europe/Madrid"), [], responses, now=NOW)

    assert list(report.trends) == ["2026-05-04"]
    assert report.trends["2026-05-04"].responses == 2
    assert report.trends["2026-05-04"].maybe == 1


def test_unknown_timezone_falls_back_to_utc():
    late = datetime(2026, 5, 3, 23, 30, tzinfo=UTC)

    report = build_report(make_event(timezone="Mars/Olympus"), [], [make_response(1, submitted_at=late)], now=NOW)

    assert list(report.trends) == ["2026-05-03"]


def test_trend_keys_are_sorted():
    responses = [make_response(3), make_response(1), make_response(2)]

    report = build_report(make_event(), [], responses, now=NOW)

    assert list(report.trends) == sorted(report.trends)


def test_milestones():
    invites = [make_invite(n) for n in range(1, 5)]
    responses = [make_response(n) for n in range(1, 4)]

    report = build_report(make_event(), invites, responses, now=NOW)

    assert [m.percentage for m in report.milestones] == [25, 50, 75]
    assert [m.count for m in report.milestones] == [1, 2, 3]
    assert report.milestones[0].reached_at == START + timedelta(days=1)
    # Event starts 2026-06-01 00:00 UTC, 29.5 days after the first response
    assert report.milestones[0].days_until_event == 29


def test_milestone_uses_event_start_time():
    event = make_event(time=time(18, 0))

    report = build_report(event, [make_invite(1)], [make_response(1)], now=NOW)

    assert report.milestones[0].days_until_event == 30


def test_dietary_analysis_ignores_declines():
    responses = [
        make_response(1, guest_count=2, dietary_options=["vegan", "gluten-free"]),
        make_response(2, attendance="maybe", dietary_options=["gluten-free", "vegan"]),
        make_response(3, attendance="no", dietary_options=["halal"]),
        make_response(4, dietary_restrictions="nut allergy"),
    ]

    report = build_report(make_event(), [], responses, now=NOW)

    assert report.dietary.preferences == {"gluten-free": 3, "vegan": 3}
    assert report.dietary.common_combinations == {"gluten-free, vegan": 2}
    assert report.dietary.total_with_dietary == 2
    assert report.dietary.total_without_dietary == 1
    assert report.dietary.restrictions == {"nut allergy": 1}


def test_guest_analysis():
    responses = [make_response(1), make_response(2, guest_count=3), make_response(3, attendance="no", guest_count=2)]

    report = build_report(make_event(), [], responses, now=NOW)

    assert report.guests.guest_count_distribution == {1: 1, 2: 1, 3: 1}
    assert report.guests.solo_attendees == 1
    assert report.guests.group_attendees == 2
    assert report.guests.max_group_size == 3


def test_average_response_time_uses_invite_creation():
    invites = [make_invite(1), make_invite(2, created_at=START + timedelta(days=1))]
    responses = [
        make_response(1, invite_id="inv_001", submitted_at=START + timedelta(days=2)),
        make_response(2, invite_id="inv_002", submitted_at=START + timedelta(days=2)),
        make_response(3, submitted_at=START + timedelta(days=3)),
    ]

    report = build_report(make_event(), invites, responses, now=NOW)

    # (2 + 1 + 3) / 3
    assert report.insights.average_response_time == 2.0


def test_peak_response_day_and_hour_prefer_earliest_on_ties():
    responses = [
        make_response(1, submitted_at=datetime(2026, 5, 2, 9, tzinfo=UTC)),
        make_response(2, submitted_at=datetime(2026, 5, 3, 14, tzinfo=UTC)),
    ]

    report = build_report(make_event(), [], responses, now=NOW)

    assert report.insights.peak_response_day == "2026-05-02"
    assert report.insights.peak_response_hour == 9


def test_spots_remaining_when_capacity_set():
    report = build_report(make_event(max_guests=10), [], [make_response(1, guest_count=4)], now=NOW)

    assert report.summary.spots_remaining == 6


def test_ignores_records_from_other_events():
    stray = make_response(9, event_id="evt_other")

    report = build_report(make_event(), [], [make_response(1), stray], now=NOW)

    assert report.summary.total_responses == 1


def test_report_is_deterministic():
    invites = [make_invite(n) for n in range(1, 6)]
    responses = [
        make_response(n, attendance=["yes", "no", "maybe"][n % 3], guest_count=n, dietary_options=["vegan", "halal"][: n % 3])
        for n in range(1, 6)
    ]

    first = build_report(make_event(), invites, responses, now=NOW)
    second = build_report(make_event(), list(reversed(invites)), list(reversed(responses)), now=NOW)

    assert first.model_dump_json() == second.model_dump_json()


@pytest.mark.parametrize("attending", [0, 1, 3, 7])
def test_response_rate_within_bounds(attending):
    invites = [make_invite(n) for n in range(1, 4)]
    responses = [make_response(n) for n in range(1, attending + 1)]

    rate = build_report(make_event(), invites, responses, now=NOW).summary.response_rate

    assert 0.0 <= rate <= 100.0


@pytest.mark.parametrize(("value", "expected"), [(0.25, 0.3), (66.66666, 66.7), (12.35, 12.4), (0.04, 0.0)])
def test_round_rate_rounds_half_up(value, expected):
    assert round_rate(value) == expected


def test_attendance_enum_is_used_in_trends():
    report = build_report(make_event(), [], [make_response(1, attendance=Attendance.NO)], now=NOW)

    bucket = next(iter(report.trends.values()))
    assert bucket.not_attending == 1
    assert bucket.total_guests == 0


def test_event_overview_matches_report_summary():
    event = make_event(max_guests=10)
    invites = [make_invite(1), make_invite(2)]
    responses = [make_response(1, guest_count=3, invite_id="inv_001"), make_response(2, event_id="evt_other")]

    overview = build_event_overview(event, invites, responses)

    assert overview.event_name == "Summer Party"
    assert overview.event_date == date(2026, 6, 1)
    assert overview.summary == build_report(event, invites, responses, now=NOW).summary
    assert overview.summary.total_responses == 1
    assert overview.summary.spots_remaining == 7


def test_overviews_sorted_by_most_recent_date_then_id():
    overviews = [
        build_event_overview(make_event(id="evt_b", date=date(2026, 6, 1)), [], []),
        build_event_overview(make_event(id="evt_c", date=date(2026, 9, 1)), [], []),
        build_event_overview(make_event(id="evt_a", date=date(2026, 6, 1)), [], []),
    ]

    assert [o.event_id for o in sort_overviews(overviews)] == ["evt_c", "evt_a", "evt_b"]
