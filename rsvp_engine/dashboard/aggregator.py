"""Dashboard report aggregation.

``build_report`` is pure: it reads snapshots of the event's invites and
responses, performs no I/O and returns the same report for the same inputs
and ``now``. Dictionary keys are emitted in sorted order.
"""

from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime, time, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rsvp_engine.core.enums import Attendance, InviteStatus
from rsvp_engine.dashboard.dtos import (
    DashboardReport,
    DietaryAnalysis,
    EventOverview,
    GuestAnalysis,
    Insights,
    Milestone,
    ReportSummary,
    TrendBucket,
)
from rsvp_engine.events.dtos import Event
from rsvp_engine.invites.dtos import Invite
from rsvp_engine.responses.dtos import Response

MILESTONE_PERCENTAGES = (25, 50, 75, 100)
ONE_DAY = timedelta(days=1)


def round_rate(value: float) -> float:
    """Round half-up to one decimal place."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def event_timezone(event: Event) -> tzinfo:
    if not event.timezone:
        return UTC
    try:
        return ZoneInfo(event.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return UTC


def event_start(event: Event, tz: tzinfo) -> datetime:
    return datetime.combine(event.date, event.time or time.min, tzinfo=tz)


def _aware(value: datetime) -> datetime:
    # Naive timestamps are treated as UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _days_between(later: datetime, earlier: datetime) -> int:
    return (_aware(later) - _aware(earlier)) // ONE_DAY


def _sorted_counts(counter: Counter) -> dict:
    return {key: counter[key] for key in sorted(counter)}


def _most_common_earliest(counter: Counter):
    if not counter:
        return None
    return min(counter, key=lambda key: (-counter[key], key))


def build_summary(event: Event, invites: tuple[Invite, ...], responses: tuple[Response, ...]) -> ReportSummary:
    responded_invite_ids = {r.invite_id for r in responses if r.invite_id}
    active = sum(1 for invite in invites if invite.status == InviteStatus.ACTIVE)
    deactivated = len(invites) - active
    total_invites = sum(
        1
        for invite in invites
        if invite.status == InviteStatus.ACTIVE or invite.id in responded_invite_ids
    )

    attendance = Counter(r.attendance for r in responses)
    total_guests = sum(max(r.guest_count, 1) for r in responses if r.attendance == Attendance.YES)

    response_rate = 0.0
    if total_invites:
        response_rate = min(max(round_rate(len(responses) / total_invites * 100), 0.0), 100.0)

    spots_remaining = None
    if event.max_guests is not None:
        spots_remaining = event.max_guests - total_guests

    return ReportSummary(
        total_invites=total_invites,
        active_invites=active,
        deactivated_invites=deactivated,
        total_responses=len(responses),
        attending=attendance[Attendance.YES],
        not_attending=attendance[Attendance.NO],
        maybe=attendance[Attendance.MAYBE],
        total_guests=total_guests,
        pending_responses=max(total_invites - len(responses), 0),
        response_rate=response_rate,
        spots_remaining=spots_remaining,
    )


def build_trends(responses: tuple[Response, ...], tz: tzinfo) -> dict[str, TrendBucket]:
    buckets: dict[str, dict[str, int]] = {}
    for response in responses:
        day = _aware(response.submitted_at).astimezone(tz).date().isoformat()
        bucket = buckets.setdefault(
            day,
            {"responses": 0, "attending": 0, "not_attending": 0, "maybe": 0, "total_guests": 0},
        )
        bucket["responses"] += 1
        if response.attendance == Attendance.YES:
            bucket["attending"] += 1
            bucket["total_guests"] += max(response.guest_count, 1)
        elif response.attendance == Attendance.NO:
            bucket["not_attending"] += 1
        else:
            bucket["maybe"] += 1
    return {day: TrendBucket(**buckets[day]) for day in sorted(buckets)}


def build_milestones(
    responses: tuple[Response, ...], total_invites: int, start: datetime
) -> list[Milestone]:
    if total_invites <= 0:
        return []

    ordered = sorted(responses, key=lambda r: (_aware(r.submitted_at), r.id))
    milestones = []
    for percentage in MILESTONE_PERCENTAGES:
        target = -(-percentage * total_invites // 100)
        if target > len(ordered):
            continue
        reached_at = ordered[target - 1].submitted_at
        milestones.append(
            Milestone(
                percentage=percentage,
                count=target,
                reached_at=reached_at,
                days_until_event=_days_between(start, reached_at),
            )
        )
    return milestones


def build_dietary_analysis(responses: tuple[Response, ...]) -> DietaryAnalysis:
    preferences: Counter = Counter()
    restrictions: Counter = Counter()
    combinations: Counter = Counter()
    with_dietary = 0
    without_dietary = 0

    for response in responses:
        if response.attendance not in (Attendance.YES, Attendance.MAYBE):
            continue
        tags = list(dict.fromkeys(response.dietary_options))
        if tags:
            with_dietary += 1
            for tag in tags:
                preferences[tag] += max(response.guest_count, 1)
            if len(tags) > 1:
                combinations[", ".join(sorted(tags))] += 1
        else:
            without_dietary += 1

        restriction = response.dietary_restrictions.strip()
        if restriction:
            restrictions[restriction] += 1

    return DietaryAnalysis(
        total_with_dietary=with_dietary,
        total_without_dietary=without_dietary,
        preferences=_sorted_counts(preferences),
        restrictions=_sorted_counts(restrictions),
        common_combinations=_sorted_counts(combinations),
    )


def build_guest_analysis(responses: tuple[Response, ...]) -> GuestAnalysis:
    counts = [max(r.guest_count, 1) for r in responses]
    return GuestAnalysis(
        guest_count_distribution=_sorted_counts(Counter(counts)),
        solo_attendees=sum(1 for count in counts if count == 1),
        group_attendees=sum(1 for count in counts if count > 1),
        max_group_size=max(counts, default=0),
    )


def _average_response_time(invites: tuple[Invite, ...], responses: tuple[Response, ...]) -> float:
    if not invites:
        return 0.0
    created_at = {invite.id: _aware(invite.created_at) for invite in invites}
    earliest = min(created_at.values())

    durations = []
    for response in responses:
        issued_at = created_at.get(response.invite_id, earliest)
        elapsed = _aware(response.submitted_at) - issued_at
        durations.append(elapsed / ONE_DAY)
    if not durations:
        return 0.0
    return round_rate(sum(durations) / len(durations))


def build_insights(
    summary: ReportSummary,
    invites: tuple[Invite, ...],
    responses: tuple[Response, ...],
    tz: tzinfo,
    start: datetime,
    now: datetime,
) -> Insights:
    attendance_rate = 0.0
    if summary.total_responses:
        attendance_rate = round_rate(summary.attending / summary.total_responses * 100)
    average_guests = 0.0
    if summary.attending:
        average_guests = round_rate(summary.total_guests / summary.attending)

    local_times = [_aware(r.submitted_at).astimezone(tz) for r in responses]
    return Insights(
        response_rate=summary.response_rate,
        attendance_rate=attendance_rate,
        average_guests_per_response=average_guests,
        average_response_time=_average_response_time(invites, responses),
        days_until_event=_days_between(start, now),
        peak_response_day=_most_common_earliest(Counter(t.date().isoformat() for t in local_times)),
        peak_response_hour=_most_common_earliest(Counter(t.hour for t in local_times)),
    )


def build_report(
    event: Event,
    invites: Iterable[Invite],
    responses: Iterable[Response],
    now: datetime,
) -> DashboardReport:
    invites = tuple(i for i in invites if i.event_id == event.id)
    responses = tuple(r for r in responses if r.event_id == event.id)
    tz = event_timezone(event)
    start = event_start(event, tz)

    summary = build_summary(event, invites, responses)
    return DashboardReport(
        event_id=event.id,
        generated_at=now,
        summary=summary,
        trends=build_trends(responses, tz),
        milestones=build_milestones(responses, summary.total_invites, start),
        dietary=build_dietary_analysis(responses),
        guests=build_guest_analysis(responses),
        insights=build_insights(summary, invites, responses, tz, start, now),
    )


def build_event_overview(
    event: Event,
    invites: Iterable[Invite],
    responses: Iterable[Response],
) -> EventOverview:
    """Headline numbers for one event in the host's list of events."""
    invites = tuple(i for i in invites if i.event_id == event.id)
    responses = tuple(r for r in responses if r.event_id == event.id)
    return EventOverview(
        event_id=event.id,
        event_name=event.name,
        event_date=event.date,
        summary=build_summary(event, invites, responses),
    )


def sort_overviews(overviews: Iterable[EventOverview]) -> list[EventOverview]:
    """Most recent event date first; ties keep id order."""
    by_id = sorted(overviews, key=lambda overview: overview.event_id)
    return sorted(by_id, key=lambda overview: overview.event_date, reverse=True)
