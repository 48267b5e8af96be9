from __future__ import annotations

import decimal
import logging
import typing as t

import pydantic as p

from examflow.core import di, TimestampProvider
from examflow.model import Evaluation, ExamID, ExamType, Submission, SubmissionID, UserID
from examflow.model.submission import ANSWER_ADAPTERS
from examflow.storage import Session
from examflow.storage import submission as submission_storage

from . import catalog, scoring
from .errors import AlreadyEvaluated, ExamTypeMismatch, InvalidPayload, InvalidScore, SubmissionNotFound

logger = logging.getLogger(__name__)

TWO_PLACES = decimal.Decimal("0.01")


def create(
    learner_id: UserID,
    exam_id: ExamID,
    submission_type: ExamType,
    answers: t.Any,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> Submission:
    """Record a learner's answers as a new submission.

    Everything is validated before the first write. Multiple-choice
    submissions are scored and moved to ``evaluated`` within the caller's
    transaction, so they are never observed as pending.
    """
    exam = catalog.get_exam(exam_id, session=session)
    if exam.exam_type is not submission_type:
        raise ExamTypeMismatch(
            f"exam {exam_id} is {exam.exam_type.value}, submission is {submission_type.value}",
            exam_id=exam_id,
        )

    adapter = ANSWER_ADAPTERS[submission_type]
    try:
        parsed = adapter.validate_python(answers)
    except p.ValidationError as e:
        raise InvalidPayload(f"malformed {submission_type.value} answers: {e}", exam_id=exam_id) from e

    if submission_type is ExamType.Descriptive and len(parsed) > len(exam.questions):
        raise InvalidPayload(
            f"{len(parsed)} answers given for {len(exam.questions)} questions",
            exam_id=exam_id,
        )

    result = scoring.score(exam, parsed) if submission_type.auto_gradable else None

    submitted_at = utcnow()
    submission = submission_storage.create(
        {
            "learner_id": learner_id,
            "exam_id": exam_id,
            "submission_type": submission_type,
            "answers": adapter.dump_python(parsed, mode="json"),
            "submitted_at": submitted_at,
        },
        session=session,
    )
    logger.info(
        "created submission",
        extra={
            "submission_id": submission.submission_id,
            "exam_id": exam_id,
            "learner_id": learner_id,
            "submission_type": submission_type.value,
        },
    )

    if result is None:
        return submission

    evaluated = submission_storage.transition_to_evaluated(
        submission.submission_id,
        score=result.score,
        evaluation=Evaluation(automatic=True, question_results=list(result.breakdown)),
        evaluated_at=submitted_at,
        session=session,
    )
    assert evaluated is not None, "freshly created submission was not pending"
    logger.info(
        "auto-graded submission",
        extra={
            "submission_id": evaluated.submission_id,
            "score": result.score,
            "total_max_marks": exam.total_max_marks,
        },
    )
    return evaluated


def evaluate(
    submission_id: SubmissionID,
    score: decimal.Decimal | int | float,
    evaluation: Evaluation,
    evaluated_by: UserID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> Submission:
    """Move a pending submission to ``evaluated`` with its score and feedback.

    Evaluation is not idempotent: a second call for the same submission, or
    the loser of two concurrent calls, gets ``AlreadyEvaluated``.
    """
    submission = submission_storage.get(submission_id, session=session)
    if submission is None:
        raise SubmissionNotFound(f"submission {submission_id} does not exist", submission_id=submission_id)
    if not submission.is_pending:
        raise AlreadyEvaluated(f"submission {submission_id} has already been evaluated", submission_id=submission_id)

    exam = catalog.get_exam(submission.exam_id, session=session)
    score = check_score(score, exam.total_max_marks)

    if evaluated_by is not None and evaluation.evaluated_by is None:
        evaluation = evaluation.model_copy(update={"evaluated_by": evaluated_by})

    evaluated = submission_storage.transition_to_evaluated(
        submission_id,
        score=score,
        evaluation=evaluation,
        evaluated_at=utcnow(),
        session=session,
    )
    if evaluated is None:
        logger.warning(
            "lost evaluation race",
            extra={
                "submission_id": submission_id,
                "evaluated_by": evaluated_by,
            },
        )
        raise AlreadyEvaluated(f"submission {submission_id} has already been evaluated", submission_id=submission_id)

    logger.info(
        "evaluated submission",
        extra={
            "submission_id": submission_id,
            "evaluated_by": evaluated_by,
            "score": score,
            "total_max_marks": exam.total_max_marks,
        },
    )
    return evaluated


def check_score(score: decimal.Decimal | int | float, total_max_marks: decimal.Decimal) -> decimal.Decimal:
    """Validate a score against the exam's total and return it as a ``Decimal``."""
    if isinstance(score, bool) or not isinstance(score, (decimal.Decimal, int, float)):
        raise InvalidScore(f"score must be a number, got {score!r}")
    value = decimal.Decimal(str(score)) if not isinstance(score, decimal.Decimal) else score
    if not value.is_finite():
        raise InvalidScore(f"score must be a finite number, got {score}")
    if value != value.quantize(TWO_PLACES):
        raise InvalidScore(f"score {value} has more than two decimal places", score=value)
    if value < 0:
        raise InvalidScore(f"score must not be negative, got {value}", score=value)
    if value > total_max_marks:
        raise InvalidScore(
            f"score {value} exceeds the exam's maximum of {total_max_marks}",
            score=value,
            total_max_marks=total_max_marks,
        )
    return value
