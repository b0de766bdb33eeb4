"""Students, weekly schedule slots and sessions

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

CATEGORY_VALUES = ("gym", "swimming", "math")
SESSION_STATUS_VALUES = ("pending", "completed", "missed", "cancelled", "rescheduled")


def _enum(values: tuple[str, ...], name: str) -> sa.Enum:
    # Native types are created once in upgrade(); tables only reference them
    return sa.Enum(*values, name=name).with_variant(
        postgresql.ENUM(*values, name=name, create_type=False), "postgresql"
    )


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        postgresql.ENUM(*CATEGORY_VALUES, name="category").create(bind, checkfirst=True)
        postgresql.ENUM(*SESSION_STATUS_VALUES, name="sessionstatus").create(bind, checkfirst=True)

    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("category", _enum(CATEGORY_VALUES, "category"), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )

    op.create_table(
        "schedule_slots",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("category", _enum(CATEGORY_VALUES, "category"), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedule_slot_day_of_week"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_schedule_slot_duration_positive"),
    )
    op.create_index("ix_schedule_slots_student_id", "schedule_slots", ["student_id"])

    op.create_table(
        "sessions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("students.id"), nullable=False),
        sa.Column("category", _enum(CATEGORY_VALUES, "category"), nullable=False),
        sa.Column("session_date", sa.Date(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column(
            "status",
            _enum(SESSION_STATUS_VALUES, "sessionstatus"),
            nullable=False,
            server_default="completed",
        ),
        sa.Column("schedule_slot_id", sa.Integer()),
        sa.Column("rescheduled_to_date", sa.Date()),
        sa.Column("rescheduled_to_time", sa.Time()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.UniqueConstraint("schedule_slot_id", "session_date", name="uq_session_slot_date"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_session_duration_positive"),
    )
    op.create_index("ix_sessions_student_id", "sessions", ["student_id"])
    op.create_index("ix_sessions_session_date", "sessions", ["session_date"])
    op.create_index("ix_sessions_schedule_slot_id", "sessions", ["schedule_slot_id"])


def downgrade() -> None:
    op.drop_index("ix_sessions_schedule_slot_id", table_name="sessions")
    op.drop_index("ix_sessions_session_date", table_name="sessions")
    op.drop_index("ix_sessions_student_id", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_schedule_slots_student_id", table_name="schedule_slots")
    op.drop_table("schedule_slots")
    op.drop_table("students")

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        postgresql.ENUM(name="sessionstatus").drop(bind, checkfirst=True)
        postgresql.ENUM(name="category").drop(bind, checkfirst=True)
