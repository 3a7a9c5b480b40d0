"""Initial schema

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(256), nullable=False, index=True),
        sa.Column("description", sa.Text),
        sa.Column("allows_multiple_system_interviews", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "systems",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(256), nullable=False, index=True),
        sa.Column("description", sa.Text),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True),
        *_timestamps(),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(255)),
        sa.Column("password_hash", sa.String(255)),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="SET NULL"), index=True),
        sa.Column("system_id", sa.Integer, sa.ForeignKey("systems.id", ondelete="SET NULL"), index=True),
        *_timestamps(),
    )

    op.create_table(
        "application_cycles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, index=True),
        sa.Column("stage", sa.String(32), nullable=False),
        sa.Column("start_date", sa.DateTime, nullable=False),
        sa.Column("end_date", sa.DateTime, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "application_cycle_stages",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("cycle_id", sa.Integer, sa.ForeignKey("application_cycles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("stage", sa.String(32), nullable=False),
        sa.Column("start_date", sa.DateTime, nullable=False),
        sa.Column("end_date", sa.DateTime, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("cycle_id", "stage", name="uq_cycle_stage"),
    )
    op.create_index("ix_cycle_stage_dates", "application_cycle_stages", ["cycle_id", "start_date", "end_date"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("team_id", sa.Integer, sa.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("system_id", sa.Integer, sa.ForeignKey("systems.id", ondelete="CASCADE"), index=True),
        sa.Column("application_cycle_id", sa.Integer,
                  sa.ForeignKey("application_cycles.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("internal_status", sa.String(32), nullable=False),
        sa.Column("internal_decision", sa.String(32)),
        sa.Column("data", sa.JSON),
        *_timestamps(),
    )

    op.create_table(
        "availabilities",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("system_id", sa.Integer, sa.ForeignKey("systems.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("start", sa.DateTime, nullable=False),
        sa.Column("end", sa.DateTime, nullable=False),
        *_timestamps(),
        sa.CheckConstraint('"end" > start', name="ck_availability_window"),
    )

    op.create_table(
        "interviews",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id", ondelete="SET NULL"), index=True),
        sa.Column("system_id", sa.Integer, sa.ForeignKey("systems.id", ondelete="SET NULL"), index=True),
        sa.Column("interviewer_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("scheduled_at", sa.DateTime, nullable=False, index=True),
        sa.Column("duration", sa.Integer, nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("location", sa.String(255)),
        sa.Column("notes", sa.Text),
        sa.Column("created_by_id", sa.Integer, sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("application_id", "system_id", name="uq_interviews_application_system"),
        sa.UniqueConstraint("system_id", "scheduled_at", name="uq_interviews_system_slot"),
    )

    op.create_table(
        "interview_notes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("interview_id", sa.Integer, sa.ForeignKey("interviews.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("note", sa.Text, nullable=False),
        sa.Column("created_by_id", sa.Integer, sa.ForeignKey("users.id", ondelete="RESTRICT"),
                  nullable=False, index=True),
        *_timestamps(),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("application_id", sa.Integer, sa.ForeignKey("applications.id", ondelete="SET NULL"), index=True),
        sa.Column("kind", sa.String(50)),
        sa.Column("idempotency_key", sa.String(255), nullable=False, unique=True),
        sa.Column("sent_to", sa.String(255)),
        sa.Column("subject", sa.String(255)),
        sa.Column("body", sa.Text),
        sa.Column("status", sa.String(20)),
        sa.Column("provider_message_id", sa.String(255)),
        sa.Column("error", sa.Text),
        sa.Column("sent_at", sa.DateTime),
        *_timestamps(),
    )


def downgrade():
    op.drop_table("notifications")
    op.drop_table("interview_notes")
    op.drop_table("interviews")
    op.drop_table("availabilities")
    op.drop_table("applications")
    op.drop_index("ix_cycle_stage_dates", table_name="application_cycle_stages")
    op.drop_table("application_cycle_stages")
    op.drop_table("application_cycles")
    op.drop_table("users")
    op.drop_table("systems")
    op.drop_table("teams")
