from __future__ import annotations

import datetime
import decimal
import typing as t

import sqlalchemy as sqla

from examflow.core import di
from examflow.model import Evaluation, ExamID, ExamType, Submission, SubmissionAdapter, SubmissionID, \
    SubmissionStats, SubmissionStatus, SubmissionSummary, UserID

from . import Session
from .table import submissions

TWO_PLACES = decimal.Decimal("0.01")


def get(key: SubmissionID, session: Session = di.Provide["storage.persistent.session"]) -> Submission | None:
    stmt = sqla.select(submissions.__table__).where(submissions.submission_id == key)
    row = session.execute(stmt).mappings().one_or_none()
    return SubmissionAdapter.validate_python(dict(row)) if row else None


def find(
    *,
    learner_id: UserID | None = None,
    exam_id: ExamID | None = None,
    submission_type: ExamType | None = None,
    status: SubmissionStatus | None = None,
    newest_first: bool = False,
    limit: int | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Submission, ...]:
    stmt = _filtered(
        sqla.select(submissions.__table__),
        learner_id=learner_id,
        exam_id=exam_id,
        submission_type=submission_type,
        status=status,
    )
    if newest_first:
        stmt = stmt.order_by(submissions.submitted_at.desc(), submissions.submission_id.desc())
    else:
        stmt = stmt.order_by(submissions.submitted_at.asc(), submissions.submission_id.asc())
    if limit is not None:
        stmt = stmt.limit(limit)
    rows = session.execute(stmt).mappings().all()
    return tuple(SubmissionAdapter.validate_python(dict(row)) for row in rows)


def find_summaries(
    *,
    status: SubmissionStatus | None = None,
    submission_type: ExamType | None = None,
    exam_id: ExamID | None = None,
    limit: int | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[SubmissionSummary, ...]:
    """Summaries only, oldest ``submitted_at`` first; ties are broken by id."""
    stmt = _filtered(
        sqla.select(
            submissions.submission_id,
            submissions.learner_id,
            submissions.exam_id,
            submissions.submission_type,
            submissions.status,
            submissions.submitted_at,
        ),
        exam_id=exam_id,
        submission_type=submission_type,
        status=status,
    ).order_by(submissions.submitted_at.asc(), submissions.submission_id.asc())
    if limit is not None:
        stmt = stmt.limit(limit)
    rows = session.execute(stmt).mappings().all()
    return tuple(SubmissionSummary(**row) for row in rows)


def create(params: SubmissionCreateParams, session: Session = di.Provide["storage.persistent.session"]) -> Submission:
    """Persist a new submission in ``pending``."""
    submission = submissions(
        submission_id=SubmissionID(),
        learner_id=params["learner_id"],
        exam_id=params["exam_id"],
        submission_type=params["submission_type"],
        status=SubmissionStatus.Pending,
        answers=params["answers"],
        submitted_at=params["submitted_at"],
    )
    session.add(submission)
    session.flush()
    return get(submission.submission_id, session=session)  # type: ignore


def transition_to_evaluated(
    key: SubmissionID,
    *,
    score: decimal.Decimal,
    evaluation: Evaluation,
    evaluated_at: datetime.datetime,
    session: Session = di.Provide["storage.persistent.session"],
) -> Submission | None:
    """Move a pending submission to ``evaluated``.

    The update is conditional on the stored status still being ``pending``, so
    of two concurrent writers exactly one wins. Returns None when no pending
    row matched, either because the submission does not exist or because it
    has already been evaluated.
    """
    table = submissions.__table__
    stmt = (
        sqla
        .update(table)
        .where(table.c.submission_id == key, table.c.status == SubmissionStatus.Pending)
        .values(
            status=SubmissionStatus.Evaluated,
            score=score,
            evaluation=evaluation.model_dump(mode="json"),
            evaluated_at=evaluated_at,
        )
    )
    result = session.execute(stmt)
    if result.rowcount != 1:  # pyright: ignore [reportAttributeAccessIssue]
        return None
    session.flush()
    return get(key, session=session)


def stats(
    *,
    exam_id: ExamID | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> SubmissionStats:
    stmt = sqla.select(
        submissions.status,
        sqla.func.count(submissions.submission_id).label("count"),
        sqla.func.avg(submissions.score).label("average_score"),
    ).group_by(submissions.status)
    if exam_id is not None:
        stmt = stmt.where(submissions.exam_id == exam_id)

    counts: dict[SubmissionStatus, int] = {}
    average_score: decimal.Decimal | None = None
    for row in session.execute(stmt).mappings():
        counts[row["status"]] = row["count"]
        if row["status"] is SubmissionStatus.Evaluated and row["average_score"] is not None:
            average_score = decimal.Decimal(str(row["average_score"])).quantize(TWO_PLACES)

    return SubmissionStats(
        total=sum(counts.values()),
        pending=counts.get(SubmissionStatus.Pending, 0),
        evaluated=counts.get(SubmissionStatus.Evaluated, 0),
        average_score=average_score,
    )


def _filtered(
    stmt: sqla.Select[t.Any],
    *,
    learner_id: UserID | None = None,
    exam_id: ExamID | None = None,
    submission_type: ExamType | None = None,
    status: SubmissionStatus | None = None,
) -> sqla.Select[t.Any]:
    if learner_id is not None:
        stmt = stmt.where(submissions.learner_id == learner_id)
    if exam_id is not None:
        stmt = stmt.where(submissions.exam_id == exam_id)
    if submission_type is not None:
        stmt = stmt.where(submissions.submission_type == submission_type)
    if status is not None:
        stmt = stmt.where(submissions.status == status)
    return stmt


class SubmissionCreateParams(t.TypedDict):
    learner_id: UserID
    exam_id: ExamID
    submission_type: ExamType
    answers: t.Any
    submitted_at: datetime.datetime
