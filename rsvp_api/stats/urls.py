OCCASION_STATS_URL = "/api/v1/occasions/{occasion_id}/stats"
EVENT_STATUS_BOARD_URL = "/api/v1/occasions/{occasion_id}/events/{event_id}/status-board"
