from __future__ import annotations

import decimal
import logging
import typing as t

from examflow.core.provider import TRACE
from examflow.model import Exam, ExamType, MCQQuestion, QuestionResult

from .errors import ExamTypeMismatch, InvalidAnswerReference

logger = logging.getLogger(__name__)


class ScoringResult(t.NamedTuple):
    score: decimal.Decimal
    breakdown: tuple[QuestionResult, ...]


def score(exam: Exam, answers: t.Mapping[int, int]) -> ScoringResult:
    """Score multiple-choice answers against the exam's answer key.

    The score is the sum of ``points`` over correctly answered questions, so
    with default points it is the count of correct answers. Unanswered
    questions are incorrect. Answers naming a question or option the exam
    does not have raise ``InvalidAnswerReference``.
    """
    if exam.exam_type is not ExamType.MCQ:
        raise ExamTypeMismatch(
            f"exam {exam.exam_id} is {exam.exam_type.value}, only mcq exams are scored automatically",
            exam_id=exam.exam_id,
        )

    questions = t.cast(list[MCQQuestion], exam.questions)
    for index, selected in answers.items():
        if not 0 <= index < len(questions):
            raise InvalidAnswerReference(
                f"answer references question {index}, exam has {len(questions)} questions",
                question_index=index,
            )
        if not 0 <= selected < len(questions[index].options):
            raise InvalidAnswerReference(
                f"answer to question {index} selects option {selected}, "
                f"question has {len(questions[index].options)} options",
                question_index=index,
                selected_option=selected,
            )

    breakdown: list[QuestionResult] = []
    total = decimal.Decimal(0)
    for index, question in enumerate(questions):
        selected = answers.get(index)
        correct = selected == question.correct_option
        awarded = question.points if correct else decimal.Decimal(0)
        total += awarded
        logger.log(
            TRACE,
            "scored question",
            extra={
                "question_index": index,
                "selected_option": selected,
                "is_correct": correct,
            },
        )
        breakdown.append(
            QuestionResult(
                question_index=index,
                selected_option=selected,
                correct_option=question.correct_option,
                is_correct=correct,
                points_awarded=awarded,
            )
        )

    logger.debug(
        "scored mcq answers",
        extra={
            "exam_id": exam.exam_id,
            "answered": len(answers),
            "questions": len(questions),
            "score": total,
        },
    )
    return ScoringResult(score=total, breakdown=tuple(breakdown))
