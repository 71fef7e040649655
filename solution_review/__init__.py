from __future__ import annotations

from solution_review.exceptions import NotFoundError, PersistenceError, ReviewError, ValidationError
from solution_review.inbox import Inbox
from solution_review.queries import SubmissionQuery, random_completed_for
from solution_review.schemas import ExerciseRef

__all__ = [
    "ExerciseRef",
    "Inbox",
    "NotFoundError",
    "PersistenceError",
    "ReviewError",
    "SubmissionQuery",
    "ValidationError",
    "random_completed_for",
]
