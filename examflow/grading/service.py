"""Inbound operations of the grading workflow.

Each operation takes the authenticated ``Caller`` and runs in a single
transaction on its own session.
"""

from __future__ import annotations

import decimal
import logging
import typing as t

from examflow.auth import Caller, require_role
from examflow.core import di, TimestampProvider
from examflow.model import BaseModel, EvaluatorRoles, Exam, ExamID, ExamType, Submission, SubmissionID, \
    SubmissionStats, SubmissionStatus, SubmissionSummary, UserID, UserRole
from examflow.storage import Session
from examflow.storage import submission as submission_storage

from . import catalog, lifecycle, queue, recorder
from .errors import Forbidden, SubmissionNotFound
from .recorder import Judgment

logger = logging.getLogger(__name__)


class SubmissionReceipt(BaseModel):
    submission_id: SubmissionID
    status: SubmissionStatus
    score: decimal.Decimal | None = None


@di.inject
def create_submission(
    caller: Caller,
    exam_id: ExamID,
    submission_type: ExamType,
    answers: t.Any,
    session: Session = di.Manage["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> SubmissionReceipt:
    require_role(caller, {UserRole.Learner}, "submit answers")
    with session.begin():
        submission = lifecycle.create(
            caller.user_id, exam_id, submission_type, answers, session=session, utcnow=utcnow
        )
    return SubmissionReceipt(
        submission_id=submission.submission_id,
        status=submission.status,
        score=submission.score,
    )


@di.inject
def list_pending_evaluations(
    caller: Caller,
    submission_type: ExamType | None = None,
    exam_id: ExamID | None = None,
    limit: int | None = None,
    session: Session = di.Manage["storage.persistent.session"],
) -> tuple[SubmissionSummary, ...]:
    require_role(caller, EvaluatorRoles, "list pending evaluations")
    with session.begin():
        return queue.pending(submission_type=submission_type, exam_id=exam_id, limit=limit, session=session)


@di.inject
def get_submission(
    caller: Caller,
    submission_id: SubmissionID,
    session: Session = di.Manage["storage.persistent.session"],
) -> Submission:
    with session.begin():
        submission = submission_storage.get(submission_id, session=session)
    if submission is None:
        raise SubmissionNotFound(f"submission {submission_id} does not exist", submission_id=submission_id)
    if not caller.is_evaluator and submission.learner_id != caller.user_id:
        raise Forbidden(
            f"submission {submission_id} belongs to another learner",
            user_id=caller.user_id,
            submission_id=submission_id,
        )
    return submission


@di.inject
def record_evaluation(
    caller: Caller,
    submission_id: SubmissionID,
    judgment: Judgment,
    session: Session = di.Manage["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> Submission:
    with session.begin():
        return recorder.record(caller, submission_id, judgment, session=session, utcnow=utcnow)


@di.inject
def update_exam_max_marks(
    caller: Caller,
    exam_id: ExamID,
    total_max_marks: decimal.Decimal,
    question_points: t.Mapping[int, decimal.Decimal] | None = None,
    session: Session = di.Manage["storage.persistent.session"],
) -> Exam:
    require_role(caller, {UserRole.Admin}, "change exam max marks")
    with session.begin():
        exam = catalog.update_max_marks(exam_id, total_max_marks, question_points, session=session)
    logger.info(
        "exam max marks changed",
        extra={
            "exam_id": exam_id,
            "admin": caller.user_id,
        },
    )
    return exam


@di.inject
def list_learner_submissions(
    caller: Caller,
    learner_id: UserID | None = None,
    session: Session = di.Manage["storage.persistent.session"],
) -> tuple[Submission, ...]:
    """A learner's submissions, newest first. Learners may only list their own."""
    learner_id = learner_id or caller.user_id
    if learner_id != caller.user_id and not caller.is_evaluator:
        raise Forbidden(
            "learners may only list their own submissions",
            user_id=caller.user_id,
            learner_id=learner_id,
        )
    with session.begin():
        return submission_storage.find(learner_id=learner_id, newest_first=True, session=session)


@di.inject
def submission_stats(
    caller: Caller,
    exam_id: ExamID | None = None,
    session: Session = di.Manage["storage.persistent.session"],
) -> SubmissionStats:
    require_role(caller, EvaluatorRoles, "view submission statistics")
    with session.begin():
        if exam_id is not None:
            catalog.get_exam(exam_id, session=session)
        return submission_storage.stats(exam_id=exam_id, session=session)
