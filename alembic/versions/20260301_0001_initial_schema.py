"""Initial schema for the shift planner.

Revision ID: 20260301_0001
Revises:
Create Date: 2026-03-01 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20260301_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "employee",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("max_shifts_per_month", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_employee_id", "employee", ["id"], unique=False)

    op.create_table(
        "shifttype",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("label", sa.String(length=120), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("required_count", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("is_closing", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.CheckConstraint("required_count >= 1", name="ck_shifttype_required_count"),
    )
    op.create_index("ix_shifttype_id", "shifttype", ["id"], unique=False)

    op.create_table(
        "availability",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "employee_id",
            sa.Integer(),
            sa.ForeignKey("employee.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("is_unavailable", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.UniqueConstraint("employee_id", "date", name="ux_availability_employee_date"),
    )
    op.create_index("ix_availability_employee_id", "availability", ["employee_id"], unique=False)
    op.create_index("ix_availability_date", "availability", ["date"], unique=False)

    op.create_table(
        "schedulemonth",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("month", sa.String(length=7), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_schedulemonth_month", "schedulemonth", ["month"], unique=True)

    op.create_table(
        "assignment",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "schedule_month_id",
            sa.Integer(),
            sa.ForeignKey("schedulemonth.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "employee_id",
            sa.Integer(),
            sa.ForeignKey("employee.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "shift_type_id",
            sa.Integer(),
            sa.ForeignKey("shifttype.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.UniqueConstraint(
            "schedule_month_id", "employee_id", "date", name="ux_assignment_employee_date"
        ),
    )
    op.create_index("ix_assignment_id", "assignment", ["id"], unique=False)
    op.create_index("ix_assignment_schedule_month_id", "assignment", ["schedule_month_id"], unique=False)
    op.create_index("ix_assignment_employee_id", "assignment", ["employee_id"], unique=False)
    op.create_index("ix_assignment_date", "assignment", ["date"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_assignment_date", table_name="assignment")
    op.drop_index("ix_assignment_employee_id", table_name="assignment")
    op.drop_index("ix_assignment_schedule_month_id", table_name="assignment")
    op.drop_index("ix_assignment_id", table_name="assignment")
    op.drop_table("assignment")

    op.drop_index("ix_schedulemonth_month", table_name="schedulemonth")
    op.drop_table("schedulemonth")

    op.drop_index("ix_availability_date", table_name="availability")
    op.drop_index("ix_availability_employee_id", table_name="availability")
    op.drop_table("availability")

    op.drop_index("ix_shifttype_id", table_name="shifttype")
    op.drop_table("shifttype")

    op.drop_index("ix_employee_id", table_name="employee")
    op.drop_table("employee")
