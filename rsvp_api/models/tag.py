from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rsvp_api.config.table_names import TableNames
from rsvp_api.models.base import Base, TimeStamp

DEFAULT_TAG_COLOR = "#6b7280"


class Tag(Base, TimeStamp):
    __tablename__ = TableNames.TAGS.value
    __table_args__ = (UniqueConstraint("occasion_id", "name", name="uq_tags_occasion_id_name"),)

    occasion_id: Mapped[str] = mapped_column(
        ForeignKey(f"{TableNames.OCCASIONS.value}.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_TAG_COLOR)
    created_by: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Tag {self.name}>"
