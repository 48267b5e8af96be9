from __future__ import annotations

import decimal
import logging
import typing as t

import pydantic as p

from examflow.core import di
from examflow.model import Exam, ExamID, ExamType, Question
from examflow.model.exam import QUESTION_MODELS
from examflow.storage import exam as exam_storage
from examflow.storage import Session

from .errors import ExamNotFound, InvalidExam

logger = logging.getLogger(__name__)

TWO_PLACES = decimal.Decimal("0.01")


def get_exam(exam_id: ExamID, session: Session = di.Provide["storage.persistent.session"]) -> Exam:
    exam = exam_storage.get(exam_id, session=session)
    if exam is None:
        raise ExamNotFound(f"exam {exam_id} does not exist", exam_id=exam_id)
    return exam


def find_exams(
    exam_type: ExamType | None = None, session: Session = di.Provide["storage.persistent.session"]
) -> tuple[Exam, ...]:
    return exam_storage.find(exam_type=exam_type, session=session)


def create_exam(
    title: str,
    exam_type: ExamType,
    questions: t.Sequence[Question | t.Mapping[str, t.Any]],
    total_max_marks: decimal.Decimal | None = None,
    description: str | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Exam:
    """Add an exam definition.

    For mcq and descriptive exams ``total_max_marks`` defaults to the sum of
    the questions' points and, when given, must equal it.
    """
    parsed = _parse_questions(exam_type, questions)
    if total_max_marks is None:
        if exam_type is ExamType.Voice:
            raise InvalidExam("voice exams need an explicit total_max_marks")
        total_max_marks = _question_total(parsed)
    check_max_marks(exam_type, parsed, total_max_marks)

    exam = exam_storage.create(
        {
            "title": title,
            "exam_type": exam_type,
            "questions": parsed,
            "total_max_marks": total_max_marks,
            "description": description,
        },
        session=session,
    )
    logger.info(
        "created exam",
        extra={
            "exam_id": exam.exam_id,
            "exam_type": exam_type.value,
            "questions": len(parsed),
            "total_max_marks": total_max_marks,
        },
    )
    return exam


def update_max_marks(
    exam_id: ExamID,
    total_max_marks: decimal.Decimal,
    question_points: t.Mapping[int, decimal.Decimal] | None = None,
    session: Session = di.Provide["storage.persistent.session"],
) -> Exam:
    """Change an exam's total, optionally re-weighting questions by index.

    The exam is only written when the result still satisfies the max-marks
    invariant.
    """
    exam = get_exam(exam_id, session=session)

    questions = list(exam.questions)
    for index, points in (question_points or {}).items():
        if not 0 <= index < len(questions):
            raise InvalidExam(
                f"exam {exam_id} has no question {index}", exam_id=exam_id, question_index=index
            )
        field = "points" if exam.exam_type is ExamType.MCQ else "max_points"
        model = QUESTION_MODELS[exam.exam_type]
        try:
            questions[index] = model.model_validate({**questions[index].model_dump(), field: points})
        except p.ValidationError as e:
            raise InvalidExam(f"invalid points for question {index}: {e}", question_index=index) from e

    check_max_marks(exam.exam_type, questions, total_max_marks)

    updated = exam_storage.update(
        exam_id,
        {"questions": questions, "total_max_marks": total_max_marks},
        session=session,
    )
    assert updated is not None
    logger.info(
        "updated exam max marks",
        extra={
            "exam_id": exam_id,
            "previous": exam.total_max_marks,
            "total_max_marks": total_max_marks,
            "question_points": dict(question_points or {}),
        },
    )
    return updated


def check_max_marks(exam_type: ExamType, questions: t.Sequence[Question], total_max_marks: decimal.Decimal) -> None:
    if not total_max_marks.is_finite() or total_max_marks <= 0:
        raise InvalidExam(f"total_max_marks must be positive, got {total_max_marks}")
    if total_max_marks != total_max_marks.quantize(TWO_PLACES):
        raise InvalidExam(f"total_max_marks {total_max_marks} has more than two decimal places")
    if exam_type is ExamType.Voice:
        return

    expected = _question_total(questions)
    if total_max_marks != expected:
        raise InvalidExam(
            f"total_max_marks {total_max_marks} does not equal the sum of question points {expected}",
            total_max_marks=total_max_marks,
            question_points=expected,
        )


def _question_total(questions: t.Sequence[Question]) -> decimal.Decimal:
    return sum((q.max_points for q in questions), decimal.Decimal(0))


def _parse_questions(exam_type: ExamType, questions: t.Sequence[Question | t.Mapping[str, t.Any]]) -> list[Question]:
    if not questions:
        raise InvalidExam("an exam needs at least one question")

    model = QUESTION_MODELS[exam_type]
    parsed: list[Question] = []
    for index, q in enumerate(questions):
        if isinstance(q, p.BaseModel) and not isinstance(q, model):
            raise InvalidExam(f"question {index} is not a {exam_type.value} question", question_index=index)
        try:
            parsed.append(q if isinstance(q, model) else model.model_validate(q))
        except p.ValidationError as e:
            raise InvalidExam(f"invalid question {index}: {e}", question_index=index) from e
    return parsed
