from datetime import UTC, datetime

from rsvp_api.webhooks.schema import ResendWebhookEvent


def test_short_utc_offset_is_accepted():
    event = ResendWebhookEvent.model_validate(
        {
            "type": "email.bounced",
            "created_at": "2026-10-01T12:00:00.000000+00",
            "data": {"email_id": "re_1", "bounce": {"type": "Permanent", "message": "gone"}},
        }
    )

    assert event.created_at == datetime(2026, 10, 1, 12, 0, tzinfo=UTC)
    assert event.data.bounce == {"type": "Permanent", "message": "gone"}


def test_extra_fields_are_tolerated():
    event = ResendWebhookEvent.model_validate(
        {"type": "email.delivered", "data": {"email_id": "re_2", "from": "hosts@example.com"}}
    )

    assert event.data.email_id == "re_2"
    assert event.created_at is None
