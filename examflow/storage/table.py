import datetime
import decimal
import enum
import typing as t

from sqlalchemy import ForeignKey, func, Index, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, MappedAsDataclass
from sqlalchemy.types import Numeric

from examflow.model import ExamID, ExamType, SubmissionID, SubmissionStatus, UserID

from .type import EnumByValue, JSONDocument, ShortUUIDKeyType, UTCDateTime

metadata = MetaData()

# scores and max marks keep two decimal places
Marks = Numeric(10, 2)


class base(MappedAsDataclass, DeclarativeBase):
    metadata = metadata
    type_annotation_map = {
        ExamID: ShortUUIDKeyType(ExamID),
        SubmissionID: ShortUUIDKeyType(SubmissionID),
        UserID: ShortUUIDKeyType(UserID),
        datetime.datetime: UTCDateTime,
        enum.Enum: EnumByValue,
    }


class exams(base):
    __tablename__ = "exams"

    exam_id: Mapped[ExamID] = mapped_column(primary_key=True)
    title: Mapped[str]
    exam_type: Mapped[ExamType]
    total_max_marks: Mapped[decimal.Decimal] = mapped_column(Marks)
    questions: Mapped[list[dict[str, t.Any]]] = mapped_column(JSONDocument, default_factory=list)
    description: Mapped[str | None] = mapped_column(default=None)
    create_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now())
    update_time: Mapped[datetime.datetime] = mapped_column(default=None, server_default=func.now(), onupdate=func.now())


class submissions(base):
    __tablename__ = "submissions"
    __table_args__ = (
        Index("ix_submissions_status_submitted_at", "status", "submitted_at"),
        Index("ix_submissions_learner_id", "learner_id"),
        Index("ix_submissions_exam_id", "exam_id"),
    )

    submission_id: Mapped[SubmissionID] = mapped_column(primary_key=True)
    learner_id: Mapped[UserID]
    exam_id: Mapped[ExamID] = mapped_column(ForeignKey("exams.exam_id"))
    submission_type: Mapped[ExamType]
    status: Mapped[SubmissionStatus]
    answers: Mapped[t.Any] = mapped_column(JSONDocument)
    submitted_at: Mapped[datetime.datetime]
    score: Mapped[decimal.Decimal | None] = mapped_column(Marks, default=None)
    evaluation: Mapped[dict[str, t.Any] | None] = mapped_column(JSONDocument, default=None)
    evaluated_at: Mapped[datetime.datetime | None] = mapped_column(default=None)
