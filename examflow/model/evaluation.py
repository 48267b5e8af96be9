import decimal
import enum
import typing as t

import annotated_types as ant
import pydantic as p

from .base import BaseModel
from .id import UserID

NonNegativeDecimal = t.Annotated[decimal.Decimal, ant.Ge(0), p.Field(decimal_places=2)]
CriterionScore = t.Annotated[decimal.Decimal, ant.Ge(0), ant.Le(10)]


class FeedbackTag(enum.Enum):
    Pronunciation = "pronunciation"
    Tone = "tone"
    Clarity = "clarity"
    Speed = "speed"
    Grammar = "grammar"
    Confidence = "confidence"
    Content = "content"
    Structure = "structure"
    Creativity = "creativity"


class QuestionResult(BaseModel):  # Not timestamped, embedded in Evaluation
    question_index: int
    selected_option: int | None = None
    correct_option: int
    is_correct: bool
    points_awarded: NonNegativeDecimal


class QuestionFeedback(BaseModel):
    question_index: t.Annotated[int, ant.Ge(0)]
    points_awarded: NonNegativeDecimal | None = None
    comment: str | None = None


class Evaluation(BaseModel):
    evaluated_by: UserID | None = None
    automatic: bool = False

    feedback: str | None = None
    tags: list[FeedbackTag] = []
    suggestions: list[str] = []

    # rubric scores on a 0-10 scale, e.g. pronunciation/clarity/tone
    criteria: dict[str, CriterionScore] = {}
    question_feedback: list[QuestionFeedback] = []
    question_results: list[QuestionResult] = []
