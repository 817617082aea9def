DASHBOARD_REPORT_URL = "/api/v1/events/{event_id}/dashboard"
DASHBOARD_OVERVIEW_URL = "/api/v1/dashboard/overview"
