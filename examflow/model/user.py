import enum


class UserRole(enum.Enum):
    Learner = "learner"
    Trainer = "trainer"
    Evaluator = "evaluator"
    Admin = "admin"


# roles allowed to grade and to see the evaluation queue
EvaluatorRoles: frozenset[UserRole] = frozenset({UserRole.Trainer, UserRole.Evaluator, UserRole.Admin})
