"""001_initial — Create programs, postings, reviewers, applications,
application_status_logs, application_evaluations, participations.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- programs ---
    op.create_table(
        "programs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("host", sa.String(200), nullable=True),
        sa.Column("organizer", sa.String(200), nullable=True),
        sa.Column("activity_start_date", sa.Date(), nullable=False),
        sa.Column("activity_end_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- postings ---
    op.create_table(
        "postings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("program_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("job_type", sa.String(100), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False),
        sa.Column("recruit_start_date", sa.Date(), nullable=False),
        sa.Column("recruit_end_date", sa.Date(), nullable=False),
        sa.Column("recruit_status_override", sa.String(20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["program_id"], ["programs.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    # --- reviewers ---
    op.create_table(
        "reviewers",
        sa.Column("reference", sa.String(100), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("reference"),
    )

    # --- applications ---
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("posting_id", sa.Integer(), nullable=False),
        sa.Column("submitter_ref", sa.String(100), nullable=False),
        sa.Column("applicant_name", sa.String(50), nullable=False),
        sa.Column("applicant_email", sa.String(255), nullable=False),
        sa.Column("applicant_phone", sa.String(20), nullable=False),
        sa.Column("file_url_1", sa.String(500), nullable=False),
        sa.Column("file_name_1", sa.String(255), nullable=False),
        sa.Column("file_url_2", sa.String(500), nullable=True),
        sa.Column("file_name_2", sa.String(255), nullable=True),
        sa.Column("referral_source", sa.String(100), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="submitted"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["posting_id"], ["postings.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_applications_status", "applications", ["status"])
    op.create_index("ix_applications_posting", "applications", ["posting_id"])
    op.create_index("ix_applications_created_at", "applications", ["created_at"])

    # --- application_status_logs ---
    op.create_table(
        "application_status_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("from_status", sa.String(20), nullable=False),
        sa.Column("to_status", sa.String(20), nullable=False),
        sa.Column("changed_by", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["application_id"],
            ["applications.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_status_logs_app_id", "application_status_logs", ["application_id"]
    )

    # --- application_evaluations ---
    op.create_table(
        "application_evaluations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("score_criteria_1", sa.Integer(), nullable=False),
        sa.Column("score_criteria_2", sa.Integer(), nullable=False),
        sa.Column("score_criteria_3", sa.Integer(), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("memo", sa.String(200), nullable=True),
        sa.Column("evaluated_by", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["application_id"],
            ["applications.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_evaluations_app_created",
        "application_evaluations",
        ["application_id", "created_at"],
    )

    # --- participations ---
    op.create_table(
        "participations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("submitter_ref", sa.String(100), nullable=False),
        sa.Column("program_id", sa.Integer(), nullable=False),
        sa.Column("posting_id", sa.Integer(), nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("participation_state", sa.String(20), nullable=False),
        sa.Column("role", sa.String(200), nullable=True),
        sa.Column("eval_scores", sa.JSON(), nullable=True),
        sa.Column("eval_total_score", sa.Integer(), nullable=True),
        sa.Column("eval_comment", sa.Text(), nullable=True),
        sa.Column("evaluated_by", sa.String(100), nullable=True),
        sa.Column("evaluated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["program_id"], ["programs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["posting_id"], ["postings.id"]),
        sa.ForeignKeyConstraint(
            ["application_id"],
            ["applications.id"],
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("application_id"),
    )
    op.create_index("ix_participations_program", "participations", ["program_id"])


def downgrade() -> None:
    op.drop_table("participations")
    op.drop_table("application_evaluations")
    op.drop_table("application_status_logs")
    op.drop_table("applications")
    op.drop_table("reviewers")
    op.drop_table("postings")
    op.drop_table("programs")
