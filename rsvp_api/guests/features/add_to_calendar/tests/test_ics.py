from dataclasses import replace
from datetime import datetime

import pytest

from rsvp_api.guests.features.add_to_calendar.ics import (
    EventNotScheduledError,
    build_event_ics,
    calendar_filename,
)
from rsvp_api.guests.tests.inmemory_models import CEREMONY, PARTY


def ics_lines(event):
    return build_event_ics(event).decode().split("\r\n")


def test_event_is_an_hour_long_by_default():
    lines = ics_lines(CEREMONY)

    assert lines[0] == "BEGIN:VCALENDAR"
    assert "DTSTART:20270612T140000" in lines
    assert "DTEND:20270612T150000" in lines
    assert "SUMMARY:jane-and-joe: Ceremony" in lines
    assert "LOCATION:Town hall" in lines


def test_own_end_time_is_kept():
    lines = ics_lines(replace(PARTY, end_date_time=datetime(2027, 6, 13, 1, 30)))

    assert "DTEND:20270613T013000" in lines
    assert not any(line.startswith("LOCATION") for line in lines)


def test_text_values_are_escaped():
    event = replace(CEREMONY, location="Hall; Room 1, East", description="Bring\nshoes")

    lines = ics_lines(event)

    assert "LOCATION:Hall\\; Room 1\\, East" in lines
    assert "DESCRIPTION:Bring\\nshoes" in lines


def test_unscheduled_event_has_no_calendar_entry():
    with pytest.raises(EventNotScheduledError):
        build_event_ics(replace(CEREMONY, start_date_time=None))


def test_calendar_filename():
    assert calendar_filename(CEREMONY) == "jane-and-joe_ceremony.ics"
    assert calendar_filename(replace(CEREMONY, name="Drinks & Dinner!")) == (
        "jane-and-joe_drinks_and_dinner.ics"
    )
