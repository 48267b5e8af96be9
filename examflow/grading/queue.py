from __future__ import annotations

from examflow.core import di
from examflow.model import ExamID, ExamType, SubmissionStatus, SubmissionSummary
from examflow.storage import Session
from examflow.storage import submission as submission_storage

from .errors import ValidationError


def pending(
    submission_type: ExamType | None = None,
    exam_id: ExamID | None = None,
    limit: int | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[SubmissionSummary, ...]:
    """Submissions awaiting a human evaluator, oldest first."""
    if limit is not None and limit < 1:
        raise ValidationError(f"limit must be positive, got {limit}", limit=limit)
    return submission_storage.find_summaries(
        status=SubmissionStatus.Pending,
        submission_type=submission_type,
        exam_id=exam_id,
        limit=limit,
        session=session,
    )
