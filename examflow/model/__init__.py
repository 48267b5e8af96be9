__all__ = [
    # Base
    "BaseModel",
    "WithTimestamps",
    # Enums
    "DeploymentEnvironment",
    # ID Types
    "ExamID",
    "SubmissionID",
    "UserID",
    # Users
    "UserRole",
    "EvaluatorRoles",
    # Exams
    "Exam",
    "ExamType",
    "MCQQuestion",
    "DescriptiveQuestion",
    "VoiceQuestion",
    "Question",
    # Evaluation
    "Evaluation",
    "FeedbackTag",
    "QuestionFeedback",
    "QuestionResult",
    # Submissions
    "Submission",
    "SubmissionAdapter",
    "SubmissionBase",
    "SubmissionStatus",
    "SubmissionStats",
    "SubmissionSummary",
    "MCQSubmission",
    "DescriptiveSubmission",
    "VoiceSubmission",
    "VoiceRecording",
]

from .base import BaseModel, WithTimestamps
from .enum import DeploymentEnvironment
from .evaluation import Evaluation, FeedbackTag, QuestionFeedback, QuestionResult
from .exam import DescriptiveQuestion, Exam, ExamType, MCQQuestion, Question, VoiceQuestion
from .id import ExamID, SubmissionID, UserID
from .submission import DescriptiveSubmission, MCQSubmission, Submission, SubmissionAdapter, SubmissionBase, \
    SubmissionStats, SubmissionStatus, SubmissionSummary, VoiceRecording, VoiceSubmission
from .user import EvaluatorRoles, UserRole
