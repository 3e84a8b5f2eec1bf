from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rsvp_api.config.table_names import TableNames
from rsvp_api.models.base import Base, BaseModel, TimeStamp


class Occasion(Base, TimeStamp):
    __tablename__ = TableNames.OCCASIONS.value

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    alias: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    hosts: Mapped[list[str]] = mapped_column(sa.JSON, nullable=False, default=list)
    invite_image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    created_by: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Occasion {self.alias}>"


class AliasIndex(BaseModel):
    """One row per claimed alias, written in the same transaction as its occasion."""

    __tablename__ = TableNames.ALIASES.value

    alias: Mapped[str] = mapped_column(String(64), primary_key=True)
    occasion_id: Mapped[str] = mapped_column(
        ForeignKey(f"{TableNames.OCCASIONS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        server_default=sa.func.current_timestamp(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AliasIndex {self.alias} -> {self.occasion_id}>"
