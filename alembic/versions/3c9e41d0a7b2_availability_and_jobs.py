"""Workers, master calendar, worker availability, jobs and quotes

Revision ID: 3c9e41d0a7b2
Revises:
Create Date: 2026-10-19 10:12:44.031562
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c9e41d0a7b2"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JOB_STATUS_ENUM = "job_status"


def upgrade() -> None:
    # --- workers ---
    op.create_table(
        "workers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("postcode", sa.String(length=16), nullable=True),
        sa.Column("radius_miles", sa.Integer(), nullable=True),
        sa.Column("availability_status", sa.String(length=32), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "worker_skills",
        sa.Column("worker_id", sa.Integer(), nullable=False),
        sa.Column("service_id", sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(["worker_id"], ["workers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("worker_id", "service_id"),
    )
    op.create_index(op.f("ix_worker_skills_worker_id"), "worker_skills", ["worker_id"], unique=False)
    op.create_index(op.f("ix_worker_skills_service_id"), "worker_skills", ["service_id"], unique=False)

    # --- master calendar ---
    op.create_table(
        "master_day_patterns",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_master_day_of_week"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("day_of_week"),
    )
    op.create_table(
        "master_blocked_dates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(length=255), nullable=True),
        sa.Column("blocked_slots", sa.JSON(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_master_blocked_dates_date"), "master_blocked_dates", ["date"], unique=True)

    # --- worker availability ---
    op.create_table(
        "worker_weekly_patterns",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("worker_id", sa.Integer(), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_worker_weekly_day"),
        sa.ForeignKeyConstraint(["worker_id"], ["workers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("worker_id", "day_of_week", name="uq_worker_weekly_day"),
    )
    op.create_index(op.f("ix_worker_weekly_patterns_worker_id"), "worker_weekly_patterns", ["worker_id"], unique=False)

    op.create_table(
        "worker_date_overrides",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("worker_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("booking_hold", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by_booking", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("base_is_available", sa.Boolean(), nullable=True),
        sa.Column("base_start_time", sa.Time(), nullable=True),
        sa.Column("base_end_time", sa.Time(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.ForeignKeyConstraint(["worker_id"], ["workers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("worker_id", "date", name="uq_worker_override_date"),
    )
    op.create_index(op.f("ix_worker_date_overrides_worker_id"), "worker_date_overrides", ["worker_id"], unique=False)
    op.create_index("ix_worker_override_date", "worker_date_overrides", ["date"], unique=False)

    # --- jobs ---
    status_col = sa.Enum("pending", "accepted", "in_progress", "completed", "cancelled", name=JOB_STATUS_ENUM)
    op.create_table(
        "jobs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("worker_id", sa.Integer(), nullable=False),
        sa.Column("quote_id", sa.Integer(), nullable=True),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_phone", sa.String(length=32), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("postcode", sa.String(length=16), nullable=True),
        sa.Column("job_description", sa.Text(), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_time", sa.Time(), nullable=True),
        sa.Column("time_slot_type", sa.String(length=8), nullable=True),
        sa.Column("status", status_col, nullable=False, server_default="pending"),
        sa.Column("payout_pence", sa.Integer(), nullable=True),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["worker_id"], ["workers.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_jobs_worker_id"), "jobs", ["worker_id"], unique=False)
    op.create_index(op.f("ix_jobs_quote_id"), "jobs", ["quote_id"], unique=False)
    op.create_index("ix_jobs_worker_date", "jobs", ["worker_id", "scheduled_date"], unique=False)
    op.create_index("ix_jobs_date", "jobs", ["scheduled_date"], unique=False)

    # --- quotes ---
    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("short_slug", sa.String(length=16), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("postcode", sa.String(length=16), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("job_description", sa.Text(), nullable=False),
        sa.Column("service_ids", sa.JSON(), nullable=False),
        sa.Column("selected_package", sa.String(length=32), nullable=True),
        sa.Column("selected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("selected_date", sa.Date(), nullable=True),
        sa.Column("time_slot_type", sa.String(length=8), nullable=True),
        sa.Column("exact_time_requested", sa.Time(), nullable=True),
        sa.Column("job_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("short_slug"),
    )


def downgrade() -> None:
    op.drop_table("quotes")

    op.drop_index("ix_jobs_date", table_name="jobs")
    op.drop_index("ix_jobs_worker_date", table_name="jobs")
    op.drop_index(op.f("ix_jobs_quote_id"), table_name="jobs")
    op.drop_index(op.f("ix_jobs_worker_id"), table_name="jobs")
    op.drop_table("jobs")
    sa.Enum(name=JOB_STATUS_ENUM).drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_worker_override_date", table_name="worker_date_overrides")
    op.drop_index(op.f("ix_worker_date_overrides_worker_id"), table_name="worker_date_overrides")
    op.drop_table("worker_date_overrides")
    op.drop_index(op.f("ix_worker_weekly_patterns_worker_id"), table_name="worker_weekly_patterns")
    op.drop_table("worker_weekly_patterns")

    op.drop_index(op.f("ix_master_blocked_dates_date"), table_name="master_blocked_dates")
    op.drop_table("master_blocked_dates")
    op.drop_table("master_day_patterns")

    op.drop_index(op.f("ix_worker_skills_service_id"), table_name="worker_skills")
    op.drop_index(op.f("ix_worker_skills_worker_id"), table_name="worker_skills")
    op.drop_table("worker_skills")
    op.drop_table("workers")
