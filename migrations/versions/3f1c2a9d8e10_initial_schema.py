"""initial schema: users, processes, workshops, equipment, reports, preferences

Revision ID: 3f1c2a9d8e10
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "3f1c2a9d8e10"
down_revision = None
branch_labels = None
depends_on = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

USER_ROLE = sa.Enum("instructor", "office", "warehouse", "admin", name="user_role")
PROCESS_TYPE = sa.Enum(
    "workshop", "course", "odt", "coaching", "consulting", "facilitation", name="process_type"
)
PROCESS_STATUS = sa.Enum("active", "completed", "cancelled", "on_hold", name="process_status")
WORKSHOP_STATUS = sa.Enum("planned", "confirmed", "completed", "cancelled", name="workshop_status")
EQUIPMENT_STATUS = sa.Enum("ORDERED", "READY", "PICKED_UP", "RETURNED", name="equipment_status")
# status_events reuses the type created with equipment_items
EQUIPMENT_STATUS_REF = postgresql.ENUM(
    "ORDERED", "READY", "PICKED_UP", "RETURNED", name="equipment_status", create_type=False
)


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False, server_default="instructor"),
        _timestamp("created_at"),
    )

    op.create_table(
        "processes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", PROCESS_TYPE, nullable=False),
        sa.Column("status", PROCESS_STATUS, nullable=False, server_default="active"),
        sa.Column("client_name", sa.String(length=255), nullable=False),
        sa.Column(
            "instructor_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("description", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_processes_status", "processes", ["status"])
    op.create_index("ix_processes_instructor_id", "processes", ["instructor_id"])

    op.create_table(
        "workshops",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("process_id", sa.Integer(), sa.ForeignKey("processes.id"), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("participants", sa.Integer(), nullable=True),
        sa.Column("status", WORKSHOP_STATUS, nullable=False, server_default="planned"),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("hr_contact_name", sa.String(length=255), nullable=True),
        sa.Column("hr_contact_phone", sa.String(length=64), nullable=True),
        sa.Column("hr_contact_email", sa.String(length=255), nullable=True),
        sa.Column("procurement_contact_name", sa.String(length=255), nullable=True),
        sa.Column("procurement_contact_phone", sa.String(length=64), nullable=True),
        sa.Column("procurement_contact_email", sa.String(length=255), nullable=True),
        sa.Column("checklist", JSON_TYPE, nullable=False),
        sa.Column("exercises", JSON_TYPE, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "instructor_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_workshops_process_id", "workshops", ["process_id"])
    op.create_index("ix_workshops_date", "workshops", ["date"])
    op.create_index("ix_workshops_instructor_id", "workshops", ["instructor_id"])

    op.create_table(
        "equipment_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("workshop_id", sa.Integer(), sa.ForeignKey("workshops.id"), nullable=True),
        sa.Column("status", EQUIPMENT_STATUS, nullable=False, server_default="ORDERED"),
        sa.Column("assigned_to", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_equipment_items_workshop_id", "equipment_items", ["workshop_id"])
    op.create_index("ix_equipment_items_status", "equipment_items", ["status"])

    op.create_table(
        "status_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "equipment_id", sa.Integer(), sa.ForeignKey("equipment_items.id"), nullable=False
        ),
        sa.Column("from_status", EQUIPMENT_STATUS_REF, nullable=True),
        sa.Column("to_status", EQUIPMENT_STATUS_REF, nullable=False),
        sa.Column(
            "changed_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_status_events_equipment_id", "status_events", ["equipment_id"])

    op.create_table(
        "monthly_reports",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("instructor_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("workshops_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "approved_by_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("instructor_id", "year", "month", name="uq_monthly_reports_period"),
    )
    op.create_index("ix_monthly_reports_instructor_id", "monthly_reports", ["instructor_id"])

    flags = [
        "on_workshop_created",
        "on_workshop_updated",
        "on_workshop_cancelled",
        "on_equipment_status_changed",
        "on_equipment_ready",
        "on_monthly_report_due",
        "on_report_approved",
        "on_process_assigned",
    ]
    op.create_table(
        "notification_preferences",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        *[sa.Column(f, sa.Boolean(), nullable=False, server_default=sa.true()) for f in flags],
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("notification_preferences")
    op.drop_index("ix_monthly_reports_instructor_id", table_name="monthly_reports")
    op.drop_table("monthly_reports")
    op.drop_index("ix_status_events_equipment_id", table_name="status_events")
    op.drop_table("status_events")
    op.drop_index("ix_equipment_items_status", table_name="equipment_items")
    op.drop_index("ix_equipment_items_workshop_id", table_name="equipment_items")
    op.drop_table("equipment_items")
    op.drop_index("ix_workshops_instructor_id", table_name="workshops")
    op.drop_index("ix_workshops_date", table_name="workshops")
    op.drop_index("ix_workshops_process_id", table_name="workshops")
    op.drop_table("workshops")
    op.drop_index("ix_processes_instructor_id", table_name="processes")
    op.drop_index("ix_processes_status", table_name="processes")
    op.drop_table("processes")
    op.drop_table("users")

    bind = op.get_bind()
    for enum in (EQUIPMENT_STATUS, WORKSHOP_STATUS, PROCESS_STATUS, PROCESS_TYPE, USER_ROLE):
        enum.drop(bind, checkfirst=True)
