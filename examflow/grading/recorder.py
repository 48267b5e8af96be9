from __future__ import annotations

import decimal
import logging

from examflow.auth import Caller, require_role
from examflow.core import di, TimestampProvider
from examflow.model import BaseModel, Evaluation, EvaluatorRoles, Exam, FeedbackTag, QuestionFeedback, Submission, \
    SubmissionID
from examflow.model.evaluation import CriterionScore
from examflow.storage import Session
from examflow.storage import submission as submission_storage

from . import catalog, lifecycle
from .errors import AlreadyEvaluated, InvalidScore, SubmissionNotFound

logger = logging.getLogger(__name__)

CRITERION_SCALE = decimal.Decimal(10)
TWO_PLACES = decimal.Decimal("0.01")


class Judgment(BaseModel):
    """An evaluator's verdict as entered, before it becomes a score.

    Any of a holistic ``score``, per-question points or rubric ``criteria``
    may be given; see ``resolve_score`` for precedence.
    """

    score: decimal.Decimal | None = None
    questions: list[QuestionFeedback] = []
    criteria: dict[str, CriterionScore] = {}
    feedback: str | None = None
    tags: list[FeedbackTag] = []
    suggestions: list[str] = []


def record(
    caller: Caller,
    submission_id: SubmissionID,
    judgment: Judgment,
    session: Session = di.Provide["storage.persistent.session"],
    utcnow: TimestampProvider = di.Provide["utcnow"],
) -> Submission:
    require_role(caller, EvaluatorRoles, "record evaluations")

    submission = submission_storage.get(submission_id, session=session)
    if submission is None:
        raise SubmissionNotFound(f"submission {submission_id} does not exist", submission_id=submission_id)
    if not submission.is_pending:
        raise AlreadyEvaluated(f"submission {submission_id} has already been evaluated", submission_id=submission_id)

    exam = catalog.get_exam(submission.exam_id, session=session)
    score = resolve_score(exam, judgment)
    evaluation = Evaluation(
        evaluated_by=caller.user_id,
        automatic=False,
        feedback=judgment.feedback,
        tags=judgment.tags,
        suggestions=judgment.suggestions,
        criteria=judgment.criteria,
        question_feedback=judgment.questions,
    )
    logger.debug(
        "resolved judgment",
        extra={
            "submission_id": submission_id,
            "evaluator": caller.user_id,
            "score": score,
            "criteria": judgment.criteria,
        },
    )
    return lifecycle.evaluate(
        submission_id, score, evaluation, evaluated_by=caller.user_id, session=session, utcnow=utcnow
    )


def resolve_score(exam: Exam, judgment: Judgment) -> decimal.Decimal:
    """Pick the score a judgment stands for.

    An explicit score wins. Failing that, per-question points are summed.
    Failing that, the mean rubric criterion (0-10) is scaled onto the exam's
    total and rounded to two places.
    """
    seen: set[int] = set()
    for q in judgment.questions:
        if q.question_index >= len(exam.questions):
            raise InvalidScore(
                f"feedback references question {q.question_index}, exam has {len(exam.questions)} questions",
                question_index=q.question_index,
            )
        if q.question_index in seen:
            raise InvalidScore(f"question {q.question_index} was judged twice", question_index=q.question_index)
        seen.add(q.question_index)

        max_points = exam.questions[q.question_index].max_points
        if q.points_awarded is not None and q.points_awarded > max_points:
            raise InvalidScore(
                f"question {q.question_index} awarded {q.points_awarded} of at most {max_points}",
                question_index=q.question_index,
            )

    if judgment.score is not None:
        return judgment.score

    awarded = [q.points_awarded for q in judgment.questions if q.points_awarded is not None]
    if awarded:
        return sum(awarded, decimal.Decimal(0))

    if judgment.criteria:
        mean = sum(judgment.criteria.values(), decimal.Decimal(0)) / len(judgment.criteria)
        return (mean / CRITERION_SCALE * exam.total_max_marks).quantize(TWO_PLACES, rounding=decimal.ROUND_HALF_UP)

    raise InvalidScore("judgment carries no score, question points or criteria")
