"""Tests for examflow.grading.scoring."""

from __future__ import annotations

import datetime
import decimal

import pytest

from examflow.grading import ExamTypeMismatch, InvalidAnswerReference
from examflow.grading.scoring import score
from examflow.model import DescriptiveQuestion, Exam, ExamID, ExamType, MCQQuestion

Now = datetime.datetime(2026, 3, 2, 9, 0, tzinfo=datetime.UTC)


def mcq_exam(*questions: MCQQuestion) -> Exam:
    return Exam(
        exam_id=ExamID(),
        title="Quiz",
        exam_type=ExamType.MCQ,
        questions=list(questions),
        total_max_marks=sum((q.points for q in questions), decimal.Decimal(0)),
        create_time=Now,
        update_time=Now,
    )


@pytest.fixture
def exam() -> Exam:
    return mcq_exam(
        MCQQuestion(prompt="First?", options=["a", "b", "c"], correct_option=0),
        MCQQuestion(prompt="Second?", options=["a", "b", "c"], correct_option=1),
        MCQQuestion(prompt="Third?", options=["a", "b", "c"], correct_option=2),
    )


class TestScore(object):
    def test_counts_correct_answers(self, exam: Exam) -> None:
        """Answers {0:0, 1:1, 2:0} against the key [0, 1, 2] score 2."""
        result = score(exam, {0: 0, 1: 1, 2: 0})

        assert result.score == 2
        assert [r.is_correct for r in result.breakdown] == [True, True, False]
        assert result.breakdown[2].selected_option == 0
        assert result.breakdown[2].correct_option == 2
        assert result.breakdown[2].points_awarded == 0

    def test_missing_answers_are_incorrect(self, exam: Exam) -> None:
        """Unanswered questions count as wrong, not as an error."""
        result = score(exam, {1: 1})

        assert result.score == 1
        assert len(result.breakdown) == 3
        assert result.breakdown[0].selected_option is None
        assert not result.breakdown[0].is_correct

    def test_no_answers_scores_zero(self, exam: Exam) -> None:
        assert score(exam, {}).score == 0

    def test_weighted_points(self) -> None:
        """Correct answers earn their question's points."""
        exam = mcq_exam(
            MCQQuestion(prompt="Easy?", options=["y", "n"], correct_option=0, points=decimal.Decimal(1)),
            MCQQuestion(prompt="Hard?", options=["y", "n"], correct_option=1, points=decimal.Decimal("2.5")),
        )

        assert score(exam, {0: 0, 1: 1}).score == decimal.Decimal("3.5")
        assert score(exam, {0: 1, 1: 1}).score == decimal.Decimal("2.5")

    @pytest.mark.parametrize("index", [3, 17, -1])
    def test_unknown_question_rejected(self, exam: Exam, index: int) -> None:
        """An answer to a question the exam does not have is rejected."""
        with pytest.raises(InvalidAnswerReference):
            score(exam, {0: 0, index: 1})

    @pytest.mark.parametrize("option", [3, -1])
    def test_unknown_option_rejected(self, exam: Exam, option: int) -> None:
        with pytest.raises(InvalidAnswerReference):
            score(exam, {0: option})

    def test_deterministic(self, exam: Exam) -> None:
        """The same answers always produce the same result."""
        answers = {0: 0, 1: 2, 2: 2}
        assert score(exam, answers) == score(exam, dict(answers))

    def test_only_mcq_exams(self) -> None:
        exam = Exam(
            exam_id=ExamID(),
            title="Essay",
            exam_type=ExamType.Descriptive,
            questions=[DescriptiveQuestion(prompt="Why?", max_points=decimal.Decimal(10))],
            total_max_marks=decimal.Decimal(10),
            create_time=Now,
            update_time=Now,
        )
        with pytest.raises(ExamTypeMismatch):
            score(exam, {0: 0})
