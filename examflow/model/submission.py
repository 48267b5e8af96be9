from __future__ import annotations

import datetime
import decimal
import enum
import typing as t
from collections.abc import Mapping

import annotated_types as ant
import pydantic as p

from .base import BaseModel
from .evaluation import Evaluation
from .exam import ExamType
from .id import ExamID, SubmissionID, UserID


class SubmissionStatus(enum.Enum):
    Pending = "pending"
    Evaluated = "evaluated"


# fields that only exist once a submission has been evaluated
EVALUATION_FIELDS: tuple[str, ...] = ("score", "evaluation", "evaluated_at")


def _normalize_question_keys(v: t.Any) -> t.Any:
    # clients send either {"0": 1} or {"q_0": 1}
    if not isinstance(v, Mapping):
        return v
    return {
        (k.removeprefix("q_") if isinstance(k, str) else k): selected
        for k, selected in t.cast(Mapping[t.Any, t.Any], v).items()
    }


MCQAnswers = t.Annotated[dict[int, int], p.BeforeValidator(_normalize_question_keys)]
DescriptiveAnswers = t.Annotated[list[str], ant.MinLen(1)]


class VoiceRecording(BaseModel):
    file_ref: t.Annotated[str, p.StringConstraints(strip_whitespace=True, min_length=1)]
    duration_seconds: t.Annotated[p.FiniteFloat, ant.Gt(0)]
    file_name: str | None = None
    file_size: t.Annotated[int, ant.Ge(0)] | None = None
    transcription: str | None = None


class SubmissionBase(BaseModel):
    kind: t.ClassVar[ExamType]

    submission_id: SubmissionID
    learner_id: UserID
    exam_id: ExamID
    submission_type: ExamType
    status: SubmissionStatus = SubmissionStatus.Pending

    submitted_at: datetime.datetime
    score: decimal.Decimal | None = None
    evaluation: Evaluation | None = None
    evaluated_at: datetime.datetime | None = None

    @p.model_validator(mode="after")
    def _check_invariants(self) -> t.Self:
        if self.submission_type is not self.kind:
            raise ValueError(f"{self.__class__.__name__} cannot carry a {self.submission_type.value} submission")

        present = [f for f in EVALUATION_FIELDS if getattr(self, f) is not None]
        if self.status is SubmissionStatus.Pending and present:
            raise ValueError(f"pending submission must not have {', '.join(present)}")
        if self.status is SubmissionStatus.Evaluated and len(present) != len(EVALUATION_FIELDS):
            missing = sorted(set(EVALUATION_FIELDS) - set(present))
            raise ValueError(f"evaluated submission is missing {', '.join(missing)}")
        return self

    @p.model_serializer(mode="wrap")
    def _omit_unevaluated(self, handler: p.SerializerFunctionWrapHandler) -> dict[str, t.Any]:
        data = handler(self)
        if self.status is SubmissionStatus.Pending:
            for f in EVALUATION_FIELDS:
                data.pop(f, None)
        return data

    @property
    def is_pending(self) -> bool:
        return self.status is SubmissionStatus.Pending


class MCQSubmission(SubmissionBase):
    kind: t.ClassVar[ExamType] = ExamType.MCQ
    answers: MCQAnswers


class DescriptiveSubmission(SubmissionBase):
    kind: t.ClassVar[ExamType] = ExamType.Descriptive
    answers: DescriptiveAnswers


class VoiceSubmission(SubmissionBase):
    kind: t.ClassVar[ExamType] = ExamType.Voice
    answers: VoiceRecording


def _submission_tag(v: t.Any) -> str | None:
    kind = v.get("submission_type") if isinstance(v, Mapping) else getattr(v, "submission_type", None)
    return kind.value if isinstance(kind, ExamType) else kind


Submission = t.Annotated[
    t.Annotated[MCQSubmission, p.Tag(ExamType.MCQ.value)]
    | t.Annotated[DescriptiveSubmission, p.Tag(ExamType.Descriptive.value)]
    | t.Annotated[VoiceSubmission, p.Tag(ExamType.Voice.value)],
    p.Discriminator(_submission_tag),
]

SubmissionAdapter: p.TypeAdapter[Submission] = p.TypeAdapter(Submission)

ANSWER_ADAPTERS: dict[ExamType, p.TypeAdapter[t.Any]] = {
    ExamType.MCQ: p.TypeAdapter(MCQAnswers),
    ExamType.Descriptive: p.TypeAdapter(DescriptiveAnswers),
    ExamType.Voice: p.TypeAdapter(VoiceRecording),
}


class SubmissionSummary(BaseModel):
    submission_id: SubmissionID
    learner_id: UserID
    exam_id: ExamID
    submission_type: ExamType
    status: SubmissionStatus
    submitted_at: datetime.datetime


class SubmissionStats(BaseModel):
    total: int = 0
    pending: int = 0
    evaluated: int = 0
    # mean over evaluated submissions only
    average_score: decimal.Decimal | None = None
