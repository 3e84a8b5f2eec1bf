"""initial_schema

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a9b7d10"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "occasions",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("alias", sa.String(length=64), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("hosts", sa.JSON(), nullable=False),
        sa.Column("invite_image_url", sa.String(length=1024), nullable=True),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_occasions_alias"), "occasions", ["alias"], unique=True)
    op.create_index(op.f("ix_occasions_created_by"), "occasions", ["created_by"], unique=False)

    op.create_table(
        "aliases",
        sa.Column("alias", sa.String(length=64), nullable=False),
        sa.Column("occasion_id", sa.String(length=128), nullable=False),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["occasion_id"], ["occasions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("alias"),
    )
    op.create_index(op.f("ix_aliases_occasion_id"), "aliases", ["occasion_id"], unique=False)

    op.create_table(
        "events",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("occasion_id", sa.String(length=128), nullable=False),
        sa.Column("occasion_alias", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("start_date_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("timezone", sa.String(length=50), nullable=False),
        sa.Column("location", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("additional_fields", sa.JSON(), nullable=False),
        sa.Column("invite_image_url", sa.String(length=1024), nullable=True),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["occasion_id"], ["occasions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("occasion_id", "name", name="uq_events_occasion_id_name"),
    )
    op.create_index(op.f("ix_events_occasion_id"), "events", ["occasion_id"], unique=False)
    op.create_index(op.f("ix_events_occasion_alias"), "events", ["occasion_alias"], unique=False)
    op.create_index(op.f("ix_events_created_by"), "events", ["created_by"], unique=False)

    op.create_table(
        "guests",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("occasion_id", sa.String(length=128), nullable=False),
        sa.Column("occasion_alias", sa.String(length=64), nullable=False),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("rsvps", sa.JSON(), nullable=False),
        sa.Column("additional_guests", sa.JSON(), nullable=False),
        sa.Column("additional_rsvps", sa.JSON(), nullable=False),
        sa.Column("email_sent", sa.Boolean(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["occasion_id"], ["occasions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_guests_occasion_id"), "guests", ["occasion_id"], unique=False)
    op.create_index(op.f("ix_guests_occasion_alias"), "guests", ["occasion_alias"], unique=False)
    op.create_index(op.f("ix_guests_created_by"), "guests", ["created_by"], unique=False)
    op.create_index(op.f("ix_guests_last_name"), "guests", ["last_name"], unique=False)

    op.create_table(
        "sub_guests",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("guest_id", sa.String(length=128), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("rsvps", sa.JSON(), nullable=False),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("assigned_by_guest", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", "guest_id"),
    )

    op.create_table(
        "tags",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("occasion_id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("color", sa.String(length=20), nullable=False),
        sa.Column("created_by", sa.String(length=128), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["occasion_id"], ["occasions.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("occasion_id", "name", name="uq_tags_occasion_id_name"),
    )
    op.create_index(op.f("ix_tags_occasion_id"), "tags", ["occasion_id"], unique=False)
    op.create_index(op.f("ix_tags_created_by"), "tags", ["created_by"], unique=False)

    # SQLAlchemy will handle enum creation with checkfirst
    op.create_table(
        "email_logs",
        sa.Column("uuid", sa.Uuid(), nullable=False),
        sa.Column("resend_email_id", sa.String(length=255), nullable=True),
        sa.Column("to_address", sa.String(length=255), nullable=False),
        sa.Column("from_address", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=500), nullable=False),
        sa.Column("html_body", sa.Text(), nullable=True),
        sa.Column("text_body", sa.Text(), nullable=True),
        sa.Column(
            "email_type",
            sa.Enum("invitation", "custom", name="email_type_enum"),
            nullable=False,
        ),
        sa.Column("guest_id", sa.String(length=128), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "pending",
                "sent",
                "delivered",
                "bounced",
                "failed",
                "complained",
                name="email_status_enum",
            ),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("bounced_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_webhook_event", sa.String(length=50), nullable=True),
        sa.Column("last_webhook_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(
        op.f("ix_email_logs_resend_email_id"), "email_logs", ["resend_email_id"], unique=True
    )
    op.create_index(op.f("ix_email_logs_to_address"), "email_logs", ["to_address"], unique=False)
    op.create_index(op.f("ix_email_logs_email_type"), "email_logs", ["email_type"], unique=False)
    op.create_index(op.f("ix_email_logs_guest_id"), "email_logs", ["guest_id"], unique=False)
    op.create_index(op.f("ix_email_logs_status"), "email_logs", ["status"], unique=False)


def downgrade() -> None:
    op.drop_table("email_logs")
    op.drop_table("tags")
    op.drop_table("sub_guests")
    op.drop_table("guests")
    op.drop_table("events")
    op.drop_table("aliases")
    op.drop_table("occasions")
    sa.Enum(name="email_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="email_type_enum").drop(op.get_bind(), checkfirst=True)
