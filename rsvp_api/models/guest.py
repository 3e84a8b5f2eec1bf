import sqlalchemy as sa
from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rsvp_api.config.table_names import TableNames
from rsvp_api.models.base import Base, TimeStamp


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value

    occasion_id: Mapped[str] = mapped_column(
        ForeignKey(f"{TableNames.OCCASIONS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    occasion_alias: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_by: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # event id -> status; a key means "invited"
    rsvps: Mapped[dict[str, str]] = mapped_column(sa.JSON, nullable=False, default=dict)
    # event id -> plus-one cap / plus-ones actually coming
    additional_guests: Mapped[dict[str, int]] = mapped_column(sa.JSON, nullable=False, default=dict)
    additional_rsvps: Mapped[dict[str, int]] = mapped_column(sa.JSON, nullable=False, default=dict)

    email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list[str]] = mapped_column(sa.JSON, nullable=False, default=list)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)

    sub_guests: Mapped[list["SubGuest"]] = relationship(
        "SubGuest",
        back_populates="guest",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="SubGuest.position",
    )

    def __repr__(self) -> str:
        return f"<Guest {self.first_name} {self.last_name}>"


class SubGuest(Base):
    """Named companion of a guest, always read and written through its guest."""

    __tablename__ = TableNames.SUB_GUESTS.value

    guest_id: Mapped[str] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    rsvps: Mapped[dict[str, str]] = mapped_column(sa.JSON, nullable=False, default=dict)
    dietary_restrictions: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_by_guest: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    guest: Mapped[Guest] = relationship("Guest", back_populates="sub_guests")

    def __repr__(self) -> str:
        return f"<SubGuest {self.first_name} {self.last_name} of {self.guest_id}>"
