from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rsvp_api.config.table_names import TableNames
from rsvp_api.models.base import Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value
    __table_args__ = (UniqueConstraint("occasion_id", "name", name="uq_events_occasion_id_name"),)

    occasion_id: Mapped[str] = mapped_column(
        ForeignKey(f"{TableNames.OCCASIONS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    occasion_alias: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date_time: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    end_date_time: Mapped[datetime | None] = mapped_column(sa.DateTime(timezone=True), nullable=True)
    timezone: Mapped[str] = mapped_column(String(50), nullable=False, default="UTC")
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_fields: Mapped[dict[str, str]] = mapped_column(sa.JSON, nullable=False, default=dict)
    invite_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_by: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Event {self.name} on {self.start_date_time}>"
