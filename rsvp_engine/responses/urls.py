EVENT_RSVPS_URL = "/api/v1/events/{event_id}/rsvps"
EXPORT_RSVPS_URL = "/api/v1/events/{event_id}/rsvps/export"
