"""client contacts, workshop summaries, app settings

Revision ID: 7b2d4e6f8a31
Revises: 3f1c2a9d8e10
Create Date: 2026-10-17 15:00:00.000000

"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "7b2d4e6f8a31"
down_revision = "3f1c2a9d8e10"
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")
CONTACT_ROLE = sa.Enum("HR", "PROCUREMENT", name="contact_role")


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "client_contacts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column("contact_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=64), nullable=True),
        sa.Column("role", CONTACT_ROLE, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_client_contacts_client_name", "client_contacts", ["client_name"])

    op.create_table(
        "workshop_summaries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "workshop_id", sa.Integer(), sa.ForeignKey("workshops.id"), nullable=False, unique=True
        ),
        sa.Column("participants_count", sa.Integer(), nullable=False),
        sa.Column("actual_exercises", JSON_TYPE, nullable=False),
        sa.Column("instructor_insight", sa.Text(), nullable=True),
        sa.Column("day_insight", sa.Text(), nullable=True),
        sa.Column("safety_incident", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("safety_details", sa.Text(), nullable=True),
        sa.Column("issues_or_exceptions", sa.Text(), nullable=True),
        sa.Column("feedback_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "submitted_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "app_settings",
        sa.Column("key", sa.String(length=100), primary_key=True),
        sa.Column("value", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_table("workshop_summaries")
    op.drop_index("ix_client_contacts_client_name", table_name="client_contacts")
    op.drop_table("client_contacts")
    CONTACT_ROLE.drop(op.get_bind(), checkfirst=True)
