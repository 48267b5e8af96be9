import importlib
import sys
import types
import typing as t

from .errors import AlreadyEvaluated, ConflictError, ExamNotFound, ExamTypeMismatch, Forbidden, GradingError, \
    InvalidAnswerReference, InvalidExam, InvalidPayload, InvalidScore, NotFound, SubmissionNotFound, ValidationError

__all__ = [
    # Errors
    "AlreadyEvaluated",
    "ConflictError",
    "ExamNotFound",
    "ExamTypeMismatch",
    "Forbidden",
    "GradingError",
    "InvalidAnswerReference",
    "InvalidExam",
    "InvalidPayload",
    "InvalidScore",
    "NotFound",
    "SubmissionNotFound",
    "ValidationError",
    # Components
    "catalog",
    "lifecycle",
    "queue",
    "recorder",
    "scoring",
    "service",
]

if t.TYPE_CHECKING:
    from . import catalog, lifecycle, queue, recorder, scoring, service


def __getattr__(name: str) -> types.ModuleType:
    if name in __all__:
        module = importlib.import_module(f"{__name__}.{name}")
        setattr(sys.modules[__name__], name, module)
        return module
    raise AttributeError(f"module {__name__} has no attribute {name}")
