OCCASION_GUESTS_URL = "/api/v1/occasions/{occasion_id}/guests"
GUEST_URL = "/api/v1/guests/{guest_id}"

# Guest self-service, authorised by knowing the guest id
GET_INVITATION_URL = "/api/v1/rsvp/{guest_id}"
SET_RSVP_STATUS_URL = "/api/v1/rsvp/{guest_id}/events/{event_id}"
SET_ADDITIONAL_GUESTS_URL = "/api/v1/rsvp/{guest_id}/events/{event_id}/additional-guests"
SET_DIETARY_RESTRICTIONS_URL = "/api/v1/rsvp/{guest_id}/dietary-restrictions"
CONFIRM_RSVP_URL = "/api/v1/rsvp/{guest_id}/confirm"
EVENT_CALENDAR_URL = "/api/v1/rsvp/{guest_id}/events/{event_id}/calendar.ics"
