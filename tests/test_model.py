"""Tests for examflow.model."""

from __future__ import annotations

import datetime
import decimal
import json

import pydantic as p
import pytest

from examflow.model import DescriptiveQuestion, DescriptiveSubmission, Evaluation, Exam, ExamID, ExamType, \
    MCQQuestion, MCQSubmission, SubmissionAdapter, SubmissionID, SubmissionStatus, UserID, VoiceQuestion, \
    VoiceSubmission

Submitted = datetime.datetime(2026, 3, 2, 9, 0, tzinfo=datetime.UTC)


def pending_payload(**kwargs: object) -> dict[str, object]:
    return {
        "submission_id": SubmissionID(),
        "learner_id": UserID(),
        "exam_id": ExamID(),
        "submission_type": "descriptive",
        "status": "pending",
        "submitted_at": Submitted,
        "answers": ["An answer."],
        **kwargs,
    }


class TestShortUUIDKey(object):
    def test_fresh_keys_carry_prefix(self) -> None:
        """A minted identifier starts with its type prefix."""
        key = ExamID()
        assert key.startswith("exam$")
        assert len(key.key) == 22

    def test_roundtrip_through_bare_key(self) -> None:
        """An identifier rebuilt from its bare key equals the original."""
        key = SubmissionID()
        assert SubmissionID(key=key.key) == key
        assert SubmissionID(str(key)) == key

    def test_wrong_prefix_rejected(self) -> None:
        """An identifier of another type is not accepted."""
        with pytest.raises(ValueError):
            SubmissionID(str(ExamID()))


class TestExam(object):
    def test_questions_take_the_exam_shape(self) -> None:
        """Question dicts are parsed as the exam type's question model."""
        exam = Exam(
            exam_id=ExamID(),
            title="Essay",
            exam_type=ExamType.Descriptive,
            questions=[{"prompt": "Why?", "max_points": "60"}, {"prompt": "How?", "max_points": "40"}],
            total_max_marks=decimal.Decimal(100),
            create_time=Submitted,
            update_time=Submitted,
        )
        assert all(isinstance(q, DescriptiveQuestion) for q in exam.questions)
        assert exam.question_points_total == 100

    def test_voice_questions_default_to_ten_points(self) -> None:
        """Voice questions are worth ten points unless told otherwise."""
        assert VoiceQuestion(prompt="Say it").max_points == 10

    def test_mcq_correct_option_must_exist(self) -> None:
        """The answer key cannot point past the options."""
        with pytest.raises(p.ValidationError):
            MCQQuestion(prompt="?", options=["a", "b"], correct_option=2)

    def test_mcq_needs_two_options(self) -> None:
        with pytest.raises(p.ValidationError):
            MCQQuestion(prompt="?", options=["a"], correct_option=0)

    def test_non_positive_total_rejected(self) -> None:
        with pytest.raises(p.ValidationError):
            Exam(
                exam_id=ExamID(),
                title="Empty",
                exam_type=ExamType.Voice,
                questions=[],
                total_max_marks=decimal.Decimal(0),
                create_time=Submitted,
                update_time=Submitted,
            )


class TestSubmission(object):
    def test_discriminated_by_submission_type(self) -> None:
        """Each submission type parses into its own variant."""
        mcq = SubmissionAdapter.validate_python(pending_payload(submission_type="mcq", answers={"0": 1}))
        voice = SubmissionAdapter.validate_python(
            pending_payload(submission_type="voice", answers={"file_ref": "a.webm", "duration_seconds": 3})
        )
        essay = SubmissionAdapter.validate_python(pending_payload())

        assert isinstance(mcq, MCQSubmission)
        assert isinstance(voice, VoiceSubmission)
        assert isinstance(essay, DescriptiveSubmission)

    def test_mcq_question_keys_normalized(self) -> None:
        """Keys of the form q_N are read as question index N."""
        s = SubmissionAdapter.validate_python(
            pending_payload(submission_type="mcq", answers={"q_0": 1, "q_3": 2, "1": 0})
        )
        assert isinstance(s, MCQSubmission)
        assert s.answers == {0: 1, 3: 2, 1: 0}

    def test_pending_cannot_carry_score(self) -> None:
        """A pending submission with a score is rejected."""
        with pytest.raises(p.ValidationError):
            SubmissionAdapter.validate_python(pending_payload(score=decimal.Decimal(5)))

    def test_evaluated_needs_every_evaluation_field(self) -> None:
        """An evaluated submission without its evaluation is rejected."""
        with pytest.raises(p.ValidationError):
            SubmissionAdapter.validate_python(
                pending_payload(status="evaluated", score=decimal.Decimal(5), evaluated_at=Submitted)
            )

    def test_evaluated_score_may_be_zero(self) -> None:
        s = SubmissionAdapter.validate_python(
            pending_payload(
                status="evaluated",
                score=decimal.Decimal(0),
                evaluation=Evaluation(feedback="Off topic."),
                evaluated_at=Submitted,
            )
        )
        assert s.status is SubmissionStatus.Evaluated
        assert s.score == 0

    def test_type_must_match_variant(self) -> None:
        """A variant cannot be built for another submission type."""
        with pytest.raises(p.ValidationError):
            MCQSubmission.model_validate(pending_payload(submission_type="descriptive", answers={0: 1}))

    def test_json_omits_evaluation_fields_while_pending(self) -> None:
        """The wire encoding of a pending submission has no score, evaluation or evaluated_at."""
        s = SubmissionAdapter.validate_python(pending_payload())
        encoded = json.loads(s.model_dump_json())

        assert encoded["status"] == "pending"
        for field in ("score", "evaluation", "evaluated_at"):
            assert field not in encoded
            assert field not in s.model_dump(mode="json")

    def test_json_keeps_evaluation_fields_once_evaluated(self) -> None:
        s = SubmissionAdapter.validate_python(
            pending_payload(
                status="evaluated",
                score=decimal.Decimal("7.5"),
                evaluation=Evaluation(feedback="Good."),
                evaluated_at=Submitted,
            )
        )
        encoded = s.model_dump(mode="json")

        assert encoded["score"] == "7.5"
        assert encoded["evaluation"]["feedback"] == "Good."
        assert encoded["evaluated_at"] is not None

    @pytest.mark.parametrize(
        "recording",
        [
            {"file_ref": "", "duration_seconds": 3},
            {"file_ref": "   ", "duration_seconds": 3},
            {"file_ref": "a.webm", "duration_seconds": 0},
            {"file_ref": "a.webm", "duration_seconds": -1},
            {"duration_seconds": 3},
        ],
    )
    def test_voice_recording_needs_reference_and_duration(self, recording: dict[str, object]) -> None:
        """Voice answers need a non-empty file reference and a positive duration."""
        with pytest.raises(p.ValidationError):
            SubmissionAdapter.validate_python(pending_payload(submission_type="voice", answers=recording))
