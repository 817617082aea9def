CREATE_EVENT_URL = "/api/v1/events"
GET_EVENT_URL = "/api/v1/events/{event_id}"
