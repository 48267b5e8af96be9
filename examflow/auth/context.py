from __future__ import annotations

import typing as t

from examflow.grading.errors import Forbidden
from examflow.model import BaseModel, EvaluatorRoles, UserID, UserRole


class Caller(BaseModel):
    """An already-authenticated identity and the role it asserts."""

    user_id: UserID
    role: UserRole

    @property
    def is_evaluator(self) -> bool:
        return self.role in EvaluatorRoles

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.Admin


def require_role(caller: Caller, roles: t.Collection[UserRole], action: str) -> None:
    if caller.role not in roles:
        allowed = ", ".join(sorted(r.value for r in roles))
        raise Forbidden(
            f"{caller.role.value} may not {action}; requires one of {allowed}",
            user_id=caller.user_id,
            role=caller.role.value,
        )
