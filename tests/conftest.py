"""Pytest fixtures for examflow tests.

Every test that touches the database gets its own in-memory SQLite database
with the schema created from the table metadata, so tests never share state.
The grading functions take their session and clock as arguments; fixtures
hand in a session bound to that database and a deterministic clock.

Usage:
    def test_something(db_session: Session, mcq_exam: Exam, learner: Caller):
        with db_session.begin():
            submission = lifecycle.create(learner.user_id, mcq_exam.exam_id, ...)
"""

from __future__ import annotations

import datetime
import decimal
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
import sqlalchemy
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import examflow
from examflow.auth import Caller
from examflow.core import ExamflowContainer
from examflow.grading import catalog, lifecycle
from examflow.model import DeploymentEnvironment, DescriptiveQuestion, Exam, ExamType, MCQQuestion, Submission, \
    UserID, UserRole, VoiceQuestion
from examflow.storage.table import metadata

Root = Path(os.path.dirname(examflow.__file__)).parent


class Clock(object):
    """A clock that moves forward one second every time it is read."""

    def __init__(self, start: datetime.datetime):
        self.now = start

    def __call__(self) -> datetime.datetime:
        self.now += datetime.timedelta(seconds=1)
        return self.now


@pytest.fixture(scope="session")
def container() -> t.Generator[ExamflowContainer, None, None]:
    """Boot the DI container once per test session, in the test environment."""
    ct = ExamflowContainer()
    ExamflowContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{Root}/config"),
        override=(),
    )

    yield ct

    ct.shutdown_resources()


@pytest.fixture
def engine() -> t.Generator[sqlalchemy.Engine, None, None]:
    engine = sqlalchemy.create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def db_session(engine: sqlalchemy.Engine) -> t.Generator[Session, None, None]:
    """Provide a session that, like production sessions, must be begun explicitly."""
    session = Session(bind=engine, autobegin=False, expire_on_commit=False)

    yield session

    session.close()


@pytest.fixture
def clock() -> Clock:
    return Clock(datetime.datetime(2026, 3, 2, 9, 0, tzinfo=datetime.UTC))


# Callers


@pytest.fixture
def learner() -> Caller:
    return Caller(user_id=UserID(), role=UserRole.Learner)


@pytest.fixture
def other_learner() -> Caller:
    return Caller(user_id=UserID(), role=UserRole.Learner)


@pytest.fixture
def evaluator() -> Caller:
    return Caller(user_id=UserID(), role=UserRole.Evaluator)


@pytest.fixture
def trainer() -> Caller:
    return Caller(user_id=UserID(), role=UserRole.Trainer)


@pytest.fixture
def admin() -> Caller:
    return Caller(user_id=UserID(), role=UserRole.Admin)


# Exams


@pytest.fixture
def exam_factory(db_session: Session) -> t.Callable[..., Exam]:
    """Factory fixture for creating exams through the catalog.

    Usage:
        def test_something(exam_factory):
            exam = exam_factory(ExamType.Voice, [VoiceQuestion(prompt="...")], total_max_marks=10)
    """

    def create_exam(
        exam_type: ExamType,
        questions: t.Sequence[t.Any],
        total_max_marks: decimal.Decimal | int | None = None,
        title: str = "Test Exam",
    ) -> Exam:
        with db_session.begin():
            return catalog.create_exam(
                title,
                exam_type,
                questions,
                total_max_marks=decimal.Decimal(total_max_marks) if total_max_marks is not None else None,
                session=db_session,
            )

    return create_exam


@pytest.fixture
def mcq_exam(exam_factory: t.Callable[..., Exam]) -> Exam:
    """Three questions whose correct options are 0, 1 and 2."""
    return exam_factory(
        ExamType.MCQ,
        [
            MCQQuestion(prompt="First?", options=["a", "b", "c"], correct_option=0),
            MCQQuestion(prompt="Second?", options=["a", "b", "c"], correct_option=1),
            MCQQuestion(prompt="Third?", options=["a", "b", "c"], correct_option=2),
        ],
        title="Basics",
    )


@pytest.fixture
def descriptive_exam(exam_factory: t.Callable[..., Exam]) -> Exam:
    """One essay question worth the whole 100 marks."""
    return exam_factory(
        ExamType.Descriptive,
        [DescriptiveQuestion(prompt="Describe your last project.", max_points=decimal.Decimal(100))],
        total_max_marks=100,
        title="Essay",
    )


@pytest.fixture
def voice_exam(exam_factory: t.Callable[..., Exam]) -> Exam:
    return exam_factory(
        ExamType.Voice,
        [VoiceQuestion(prompt="Read the passage aloud.", target_words=["clarity", "confidence"])],
        total_max_marks=10,
        title="Pronunciation",
    )


# Submissions


@pytest.fixture
def submission_factory(db_session: Session, clock: Clock) -> t.Callable[..., Submission]:
    """Factory fixture for submitting answers through the lifecycle manager.

    Usage:
        def test_something(submission_factory, voice_exam, learner):
            submission = submission_factory(voice_exam, learner, {"file_ref": "rec.webm", "duration_seconds": 4})
    """

    def create_submission(exam: Exam, caller: Caller, answers: t.Any) -> Submission:
        with db_session.begin():
            return lifecycle.create(
                caller.user_id, exam.exam_id, exam.exam_type, answers, session=db_session, utcnow=clock
            )

    return create_submission


@pytest.fixture
def recording() -> dict[str, t.Any]:
    return {
        "file_ref": "recordings/2026/03/take-1.webm",
        "duration_seconds": 42.5,
        "file_name": "take-1.webm",
        "file_size": 184320,
    }
