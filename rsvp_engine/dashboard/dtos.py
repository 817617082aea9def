from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class ReportModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class ReportSummary(ReportModel):
    total_invites: int
    active_invites: int
    deactivated_invites: int
    total_responses: int
    attending: int
    not_attending: int
    maybe: int
    total_guests: int
    pending_responses: int
    response_rate: float
    spots_remaining: int | None = None


class TrendBucket(ReportModel):
    responses: int = 0
    attending: int = 0
    not_attending: int = 0
    maybe: int = 0
    total_guests: int = 0


class Milestone(ReportModel):
    percentage: int
    count: int
    reached_at: datetime
    days_until_event: int | None


class DietaryAnalysis(ReportModel):
    total_with_dietary: int = 0
    total_without_dietary: int = 0
    preferences: dict[str, int] = {}
    restrictions: dict[str, int] = {}
    common_combinations: dict[str, int] = {}


class GuestAnalysis(ReportModel):
    guest_count_distribution: dict[int, int] = {}
    solo_attendees: int = 0
    group_attendees: int = 0
    max_group_size: int = 0


class Insights(ReportModel):
    response_rate: float
    attendance_rate: float
    average_guests_per_response: float
    average_response_time: float
    days_until_event: int | None
    peak_response_day: str | None = None
    peak_response_hour: int | None = None


class DashboardReport(ReportModel):
    event_id: str
    generated_at: datetime
    summary: ReportSummary
    trends: dict[str, TrendBucket]
    milestones: list[Milestone]
    dietary: DietaryAnalysis
    guests: GuestAnalysis
    insights: Insights


class EventOverview(ReportModel):
    event_id: str
    event_name: str
    event_date: date
    summary: ReportSummary
