OCCASION_EVENTS_URL = "/api/v1/occasions/{occasion_id}/events"
EVENT_URL = "/api/v1/events/{event_id}"
