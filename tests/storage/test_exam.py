"""Tests for examflow.storage.exam module."""

from __future__ import annotations

import decimal
import typing as t

from sqlalchemy.orm import Session

from examflow.model import DescriptiveQuestion, Exam, ExamID, ExamType, MCQQuestion, VoiceQuestion
from examflow.storage import exam as exam_storage


def create(session: Session, **params: t.Any) -> Exam:
    params.setdefault("title", "Stored Exam")
    params.setdefault("exam_type", ExamType.Descriptive)
    params.setdefault("total_max_marks", decimal.Decimal(20))
    params.setdefault("questions", [DescriptiveQuestion(prompt="Why?", max_points=decimal.Decimal(20))])
    with session.begin():
        return exam_storage.create(t.cast(exam_storage.ExamCreateParams, params), session=session)


class TestGet(object):
    """Tests for exam_storage.get()."""

    def test_get_returns_exam(self, db_session: Session) -> None:
        """get() returns the exam with its questions rebuilt."""
        exam = create(
            db_session,
            title="Quiz",
            exam_type=ExamType.MCQ,
            total_max_marks=decimal.Decimal(2),
            questions=[
                MCQQuestion(prompt="One?", options=["a", "b"], correct_option=1),
                MCQQuestion(prompt="Two?", options=["a", "b"], correct_option=0),
            ],
        )

        with db_session.begin():
            result = exam_storage.get(exam.exam_id, session=db_session)

        assert result is not None
        assert result.title == "Quiz"
        assert result.exam_type is ExamType.MCQ
        assert result.total_max_marks == 2
        assert isinstance(result.questions[0], MCQQuestion)
        assert result.questions[0].correct_option == 1
        assert result.create_time.tzinfo is not None

    def test_get_nonexistent_returns_none(self, db_session: Session) -> None:
        with db_session.begin():
            assert exam_storage.get(ExamID(), session=db_session) is None


class TestFind(object):
    """Tests for exam_storage.find()."""

    def test_find_all_ordered_by_title(self, db_session: Session) -> None:
        create(db_session, title="Zeta")
        create(db_session, title="Alpha")

        with db_session.begin():
            result = exam_storage.find(session=db_session)

        assert [e.title for e in result] == ["Alpha", "Zeta"]

    def test_find_by_type(self, db_session: Session) -> None:
        create(db_session, title="Essay")
        create(
            db_session,
            title="Speech",
            exam_type=ExamType.Voice,
            total_max_marks=decimal.Decimal(10),
            questions=[VoiceQuestion(prompt="Say hello.")],
        )

        with db_session.begin():
            result = exam_storage.find(exam_type=ExamType.Voice, session=db_session)

        assert [e.title for e in result] == ["Speech"]


class TestUpdate(object):
    """Tests for exam_storage.update()."""

    def test_update_fields(self, db_session: Session) -> None:
        exam = create(db_session)

        with db_session.begin():
            result = exam_storage.update(
                exam.exam_id,
                {
                    "total_max_marks": decimal.Decimal(40),
                    "questions": [DescriptiveQuestion(prompt="Why?", max_points=decimal.Decimal(40))],
                },
                session=db_session,
            )

        assert result is not None
        assert result.total_max_marks == 40
        assert result.questions[0].max_points == 40
        assert result.title == exam.title

    def test_update_nothing(self, db_session: Session) -> None:
        """An empty update leaves the exam untouched."""
        exam = create(db_session)

        with db_session.begin():
            result = exam_storage.update(exam.exam_id, {}, session=db_session)

        assert result == exam

    def test_update_nonexistent_returns_none(self, db_session: Session) -> None:
        with db_session.begin():
            assert exam_storage.update(ExamID(), {"title": "Nope"}, session=db_session) is None
