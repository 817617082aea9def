EVENT_INVITES_URL = "/api/v1/events/{event_id}/invites"
GET_INVITE_URL = "/api/v1/invites/{invite_id}"
DEACTIVATE_INVITE_URL = "/api/v1/invites/{invite_id}/deactivate"
