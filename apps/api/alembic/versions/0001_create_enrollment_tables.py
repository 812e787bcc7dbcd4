"""create enrollment tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

This migration creates:
1. enrollment_periods - recruitment cycles with their dates and status
2. grade_level_fees - fee schedule per grade level and period (cents)
3. enrollments - student enrollments with assessed fees and balance (cents)
4. payment_reminders - record of reminder emails sent per enrollment

Enum types are created once with checkfirst; grade_level is shared by
grade_level_fees and enrollments.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Enum labels are the Python enum member names (SQLAlchemy's default)
enrollment_period_status = postgresql.ENUM(
    "UPCOMING", "ACTIVE", "CLOSED", name="enrollment_period_status", create_type=False
)
grade_level = postgresql.ENUM(
    "KINDER",
    "GRADE_1",
    "GRADE_2",
    "GRADE_3",
    "GRADE_4",
    "GRADE_5",
    "GRADE_6",
    name="grade_level",
    create_type=False,
)
enrollment_status = postgresql.ENUM(
    "PENDING", "APPROVED", "REJECTED", "ENROLLED", name="enrollment_status", create_type=False
)
payment_status = postgresql.ENUM(
    "PENDING", "PARTIAL", "PAID", name="payment_status", create_type=False
)
payment_reminder_type = postgresql.ENUM(
    "UPCOMING_7DAYS",
    "UPCOMING_3DAYS",
    "UPCOMING_1DAY",
    "OVERDUE",
    "OVERDUE_7DAYS",
    "OVERDUE_30DAYS",
    name="payment_reminder_type",
    create_type=False,
)

ENUMS = (
    enrollment_period_status,
    grade_level,
    enrollment_status,
    payment_status,
    payment_reminder_type,
)


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Create enum types and the four enrollment tables."""
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "enrollment_periods",
        *_base_columns(),
        sa.Column("school_year", sa.String(length=9), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("early_registration_deadline", sa.Date(), nullable=True),
        sa.Column("regular_registration_deadline", sa.Date(), nullable=False),
        sa.Column("late_registration_deadline", sa.Date(), nullable=True),
        sa.Column("status", enrollment_period_status, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("allow_new_students", sa.Boolean(), nullable=False),
        sa.Column("allow_returning_students", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_enrollment_periods_status", "enrollment_periods", ["status"])
    op.create_index("ix_enrollment_periods_school_year", "enrollment_periods", ["school_year"])

    op.create_table(
        "grade_level_fees",
        *_base_columns(),
        sa.Column("enrollment_period_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("grade_level", grade_level, nullable=False),
        sa.Column("tuition_fee_cents", sa.BigInteger(), nullable=False),
        sa.Column("registration_fee_cents", sa.BigInteger(), nullable=True),
        sa.Column("miscellaneous_fee_cents", sa.BigInteger(), nullable=True),
        sa.Column("laboratory_fee_cents", sa.BigInteger(), nullable=True),
        sa.Column("library_fee_cents", sa.BigInteger(), nullable=True),
        sa.Column("sports_fee_cents", sa.BigInteger(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["enrollment_period_id"], ["enrollment_periods.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint(
            "enrollment_period_id", "grade_level", name="uq_grade_level_fees_period_grade"
        ),
    )
    op.create_index(
        "ix_grade_level_fees_enrollment_period_id", "grade_level_fees", ["enrollment_period_id"]
    )

    op.create_table(
        "enrollments",
        *_base_columns(),
        sa.Column("enrollment_period_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("student_name", sa.String(length=255), nullable=False),
        sa.Column("is_returning_student", sa.Boolean(), nullable=False),
        sa.Column("grade_level", grade_level, nullable=False),
        sa.Column("guardian_name", sa.String(length=255), nullable=False),
        sa.Column("guardian_email", sa.String(length=255), nullable=False),
        sa.Column("status", enrollment_status, nullable=False),
        sa.Column("payment_status", payment_status, nullable=False),
        sa.Column("net_amount_cents", sa.BigInteger(), nullable=False),
        sa.Column("amount_paid_cents", sa.BigInteger(), nullable=False),
        sa.Column("balance_cents", sa.BigInteger(), nullable=False),
        sa.Column("payment_due_date", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["enrollment_period_id"], ["enrollment_periods.id"], ondelete="RESTRICT"
        ),
    )
    op.create_index(
        "ix_enrollments_enrollment_period_id", "enrollments", ["enrollment_period_id"]
    )
    op.create_index("ix_enrollments_status", "enrollments", ["status"])
    op.create_index("ix_enrollments_guardian_email", "enrollments", ["guardian_email"])

    op.create_table(
        "payment_reminders",
        *_base_columns(),
        sa.Column("enrollment_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reminder_type", payment_reminder_type, nullable=False),
        sa.Column(
            "sent_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["enrollment_id"], ["enrollments.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_payment_reminders_enrollment_type",
        "payment_reminders",
        ["enrollment_id", "reminder_type"],
    )


def downgrade() -> None:
    """Drop the tables in reverse dependency order, then the enum types."""
    op.drop_index("ix_payment_reminders_enrollment_type", table_name="payment_reminders")
    op.drop_table("payment_reminders")

    op.drop_index("ix_enrollments_guardian_email", table_name="enrollments")
    op.drop_index("ix_enrollments_status", table_name="enrollments")
    op.drop_index("ix_enrollments_enrollment_period_id", table_name="enrollments")
    op.drop_table("enrollments")

    op.drop_index("ix_grade_level_fees_enrollment_period_id", table_name="grade_level_fees")
    op.drop_table("grade_level_fees")

    op.drop_index("ix_enrollment_periods_school_year", table_name="enrollment_periods")
    op.drop_index("ix_enrollment_periods_status", table_name="enrollment_periods")
    op.drop_table("enrollment_periods")

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
