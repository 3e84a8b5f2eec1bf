"""Calendar (.ics) files for a single invited event."""

import re
from datetime import datetime, timedelta, timezone

from icalendar import Calendar, Event

from rsvp_api.events.dtos import EventDTO

PRODID = "-//Occasion RSVP//Calendar Event//EN"
DEFAULT_DURATION = timedelta(hours=1)


class EventNotScheduledError(Exception):
    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event '{event_id}' has no start time yet")


def calendar_title(event: EventDTO) -> str:
    return f"{event.occasion_alias}: {event.name}" if event.occasion_alias else event.name


def calendar_filename(event: EventDTO) -> str:
    name = f"{event.occasion_alias}_{event.name}" if event.occasion_alias else event.name
    name = re.sub(r"[^a-z0-9\-_.]", "_", name.lower().replace("&", "and"))
    return f"{name.strip('_') or 'event'}.ics"


def build_event_ics(event: EventDTO) -> bytes:
    """One VEVENT, an hour long unless the event has its own end time.

    Naive datetimes are written as floating local times. Text values are
    escaped by icalendar.
    """
    if event.start_date_time is None:
        raise EventNotScheduledError(event.id)

    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")

    vevent = Event()
    vevent.add("uid", f"{event.id}@{event.occasion_alias or 'rsvp'}")
    vevent.add("dtstamp", datetime.now(timezone.utc))
    vevent.add("dtstart", event.start_date_time)
    vevent.add("dtend", event.end_date_time or event.start_date_time + DEFAULT_DURATION)
    vevent.add("summary", calendar_title(event))
    if event.location:
        vevent.add("location", event.location)
    if event.description:
        vevent.add("description", event.description)

    cal.add_component(vevent)
    return cal.to_ical()
