"""Initial schema for exams and submissions

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""

import typing as t

from alembic import op
from sqlalchemy import func as f
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.schema import Column, ForeignKey
from sqlalchemy.types import DateTime, JSON, Numeric, String, Text

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | t.Sequence[str] | None = None
depends_on: str | t.Sequence[str] | None = None

Document = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


def upgrade() -> None:
    op.create_table(
        "exams",
        Column("exam_id", String(22), primary_key=True),
        Column("title", String, nullable=False),
        Column("description", Text, nullable=True),
        Column("exam_type", String, nullable=False),
        Column("questions", Document, nullable=False),
        Column("total_max_marks", Numeric(10, 2), nullable=False),
        Column("create_time", DateTime(timezone=True), server_default=f.now(), nullable=False),
        Column("update_time", DateTime(timezone=True), server_default=f.now(), onupdate=f.now(), nullable=False),
    )

    op.create_table(
        "submissions",
        Column("submission_id", String(22), primary_key=True),
        Column("learner_id", String(22), nullable=False),
        Column("exam_id", String(22), ForeignKey("exams.exam_id"), nullable=False),
        Column("submission_type", String, nullable=False),
        Column("status", String, server_default="pending", nullable=False),
        Column("answers", Document, nullable=False),
        Column("score", Numeric(10, 2), nullable=True),
        Column("evaluation", Document, nullable=True),
        Column("submitted_at", DateTime(timezone=True), nullable=False),
        Column("evaluated_at", DateTime(timezone=True), nullable=True),
    )

    op.create_index("ix_submissions_status_submitted_at", "submissions", ["status", "submitted_at"])
    op.create_index("ix_submissions_learner_id", "submissions", ["learner_id"])
    op.create_index("ix_submissions_exam_id", "submissions", ["exam_id"])


def downgrade() -> None:
    op.drop_index("ix_submissions_exam_id", table_name="submissions")
    op.drop_index("ix_submissions_learner_id", table_name="submissions")
    op.drop_index("ix_submissions_status_submitted_at", table_name="submissions")

    op.drop_table("submissions")
    op.drop_table("exams")
