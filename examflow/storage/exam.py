from __future__ import annotations

import decimal
import typing as t

import sqlalchemy as sqla

from examflow.core import di
from examflow.model import Exam, ExamID, ExamType, Question

from . import Session
from .table import exams


def get(key: ExamID, session: Session = di.Provide["storage.persistent.session"]) -> Exam | None:
    stmt = sqla.select(exams.__table__).where(exams.exam_id == key)
    row = session.execute(stmt).mappings().one_or_none()
    return Exam(**row) if row else None


def find(
    *,
    exam_type: ExamType | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> tuple[Exam, ...]:
    stmt = sqla.select(exams.__table__).order_by(exams.title, exams.exam_id)
    if exam_type is not None:
        stmt = stmt.where(exams.exam_type == exam_type)
    rows = session.execute(stmt).mappings().all()
    return tuple(Exam(**row) for row in rows)


def create(params: ExamCreateParams, session: Session = di.Provide["storage.persistent.session"]) -> Exam:
    exam = exams(
        exam_id=ExamID(),
        title=params["title"],
        exam_type=params["exam_type"],
        total_max_marks=params["total_max_marks"],
        questions=[q.model_dump(mode="json") for q in params.get("questions", [])],
        description=params.get("description"),
    )
    session.add(exam)
    session.flush()
    return get(exam.exam_id, session=session)  # type: ignore


def update(
    key: ExamID,
    params: ExamUpdateParams,
    session: Session = di.Provide["storage.persistent.session"],
) -> Exam | None:
    values: dict[str, t.Any] = {}
    for field, value in params.items():
        if field == "questions":
            value = [q.model_dump(mode="json") for q in t.cast(t.Sequence[Question], value)]
        values[field] = value
    if values:
        stmt = sqla.update(exams).where(exams.exam_id == key).values(**values)
        session.execute(stmt)
        session.flush()
    return get(key, session=session)


class ExamCreateParams(t.TypedDict, total=False):
    title: t.Required[str]
    exam_type: t.Required[ExamType]
    total_max_marks: t.Required[decimal.Decimal]
    questions: t.Sequence[Question]
    description: str | None


class ExamUpdateParams(t.TypedDict, total=False):
    title: str
    description: str | None
    questions: t.Sequence[Question]
    total_max_marks: decimal.Decimal
