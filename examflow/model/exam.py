from __future__ import annotations

import decimal
import enum
import typing as t

import annotated_types as ant
import pydantic as p

from .base import BaseModel, WithTimestamps
from .id import ExamID

# marks are stored with two decimal places
Points = t.Annotated[decimal.Decimal, ant.Gt(0), p.Field(decimal_places=2)]


class ExamType(enum.Enum):
    MCQ = "mcq"
    Descriptive = "descriptive"
    Voice = "voice"

    @property
    def auto_gradable(self) -> bool:
        return self is ExamType.MCQ


class MCQQuestion(BaseModel):
    prompt: str
    options: t.Annotated[list[str], ant.MinLen(2)]
    correct_option: t.Annotated[int, ant.Ge(0)]
    points: Points = decimal.Decimal(1)
    explanation: str | None = None

    @p.model_validator(mode="after")
    def _check_correct_option(self) -> t.Self:
        if self.correct_option >= len(self.options):
            raise ValueError(f"correct_option {self.correct_option} is not one of {len(self.options)} options")
        return self

    @property
    def max_points(self) -> decimal.Decimal:
        return self.points


class DescriptiveQuestion(BaseModel):
    prompt: str
    max_points: Points
    instructions: str | None = None
    word_limit: t.Annotated[int, ant.Gt(0)] | None = None


class VoiceQuestion(BaseModel):
    prompt: str
    target_words: list[str] = []
    instructions: str | None = None
    sample_audio_url: str | None = None
    max_points: Points = decimal.Decimal(10)


Question = MCQQuestion | DescriptiveQuestion | VoiceQuestion

QUESTION_MODELS: dict[ExamType, type[MCQQuestion] | type[DescriptiveQuestion] | type[VoiceQuestion]] = {
    ExamType.MCQ: MCQQuestion,
    ExamType.Descriptive: DescriptiveQuestion,
    ExamType.Voice: VoiceQuestion,
}


class Exam(WithTimestamps):
    exam_id: ExamID
    title: str
    description: str | None = None
    exam_type: ExamType
    questions: list[Question] = []
    total_max_marks: Points

    @p.field_validator("questions", mode="before")
    @classmethod
    def _questions_for_type(cls, v: t.Any, info: p.ValidationInfo) -> t.Any:
        # every question of an exam has the exam's own shape
        exam_type = info.data.get("exam_type")
        if exam_type is None or not isinstance(v, list):
            return v
        model = QUESTION_MODELS[exam_type]
        try:
            return [q if isinstance(q, model) else model.model_validate(q) for q in t.cast(list[t.Any], v)]
        except p.ValidationError as e:
            raise ValueError(f"invalid {exam_type.value} question: {e}") from e

    @property
    def question_points_total(self) -> decimal.Decimal:
        return sum((q.max_points for q in self.questions), decimal.Decimal(0))
