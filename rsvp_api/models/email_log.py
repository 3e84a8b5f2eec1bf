from datetime import datetime
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rsvp_api.config.table_names import TableNames
from rsvp_api.models.base import TimeStamp


class EmailLog(TimeStamp):
    __tablename__ = TableNames.EMAIL_LOGS.value

    uuid: Mapped[UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid4)
    resend_email_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True, unique=True
    )

    to_address: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    from_address: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)

    # stored for debugging/audit
    html_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    text_body: Mapped[str | None] = mapped_column(Text, nullable=True)

    email_type: Mapped[str] = mapped_column(
        Enum("invitation", "custom", name="email_type_enum"),
        nullable=False,
        index=True,
    )
    # no FK: the log outlives deleted guests
    guest_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)

    status: Mapped[str] = mapped_column(
        Enum(
            "pending",
            "sent",
            "delivered",
            "bounced",
            "failed",
            "complained",
            name="email_status_enum",
        ),
        default="pending",
        nullable=False,
        index=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    bounced_at: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    last_webhook_event: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_webhook_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )

    def __repr__(self) -> str:
        return f"<EmailLog {self.email_type} to {self.to_address}: {self.status}>"
