"""Exceptions raised by the grading workflow."""

from __future__ import annotations

import typing as t


class GradingError(Exception):
    """Base class for every error the grading workflow raises on purpose."""

    code: t.ClassVar[str] = "grading_error"

    def __init__(self, message: str, **details: t.Any) -> None:
        super().__init__(message)
        self.details = details


class ValidationError(GradingError):
    """The request was malformed; nothing was written."""

    code = "invalid_request"


class ExamTypeMismatch(ValidationError):
    code = "exam_type_mismatch"


class InvalidPayload(ValidationError):
    code = "invalid_payload"


class InvalidAnswerReference(ValidationError):
    code = "invalid_answer_reference"


class InvalidScore(ValidationError):
    code = "invalid_score"


class InvalidExam(ValidationError):
    code = "invalid_exam"


class NotFound(GradingError):
    code = "not_found"


class ExamNotFound(NotFound):
    code = "exam_not_found"


class SubmissionNotFound(NotFound):
    code = "submission_not_found"


class ConflictError(GradingError):
    """Someone else already acted on the same record."""

    code = "conflict"


class AlreadyEvaluated(ConflictError):
    code = "already_evaluated"


class Forbidden(GradingError):
    code = "forbidden"
