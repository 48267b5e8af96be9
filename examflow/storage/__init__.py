"""Persistence for exams and submissions.

Every repository function takes the ``Session`` it runs in, injected from the
container unless passed explicitly, and leaves transaction control to the
caller.
"""

from sqlalchemy.orm import Session

from . import exam, submission

__all__ = ["Session", "exam", "submission"]
