"""Composable selection predicates over submissions.

Every predicate returns a new ``SubmissionQuery`` wrapping the same SELECT with
one more criterion, so callers can chain them freely and the store evaluates the
conjunction in a single statement::

    stale = SubmissionQuery().aging(now=now).for_language("python").excluding(user)
    rows = await stale.reversed().limit(20).all(session)
"""

from __future__ import annotations

import random
from datetime import datetime

from sqlalchemy import Select, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from solution_review.clock import utcnow
from solution_review.config import aging_threshold, recent_window
from solution_review.db import persistence_guard
from solution_review.models import (
    PENDING_OR_NEEDS_INPUT,
    Comment,
    Like,
    Mute,
    Submission,
    SubmissionState,
    User,
)
from solution_review.schemas import ExerciseRef


class SubmissionQuery:
    def __init__(self, statement: Select | None = None) -> None:
        self.statement = statement if statement is not None else select(Submission)

    def _where(self, *criteria) -> SubmissionQuery:  # noqa: ANN002
        return SubmissionQuery(self.statement.where(*criteria))

    def done(self) -> SubmissionQuery:
        return self._where(Submission.state == SubmissionState.DONE.value)

    def pending(self) -> SubmissionQuery:
        return self._where(Submission.state.in_(PENDING_OR_NEEDS_INPUT))

    def hibernating(self) -> SubmissionQuery:
        return self._where(Submission.state == SubmissionState.HIBERNATING.value)

    def needs_input(self) -> SubmissionQuery:
        return self._where(Submission.state == SubmissionState.NEEDS_INPUT.value)

    def aging(self, now: datetime | None = None) -> SubmissionQuery:
        """Pending submissions that got nits and have been sitting for weeks."""
        cutoff = (now or utcnow()) - aging_threshold()
        return self.pending()._where(Submission.nit_count > 0, Submission.created_at < cutoff)

    def chronological(self) -> SubmissionQuery:
        return SubmissionQuery(self.statement.order_by(Submission.created_at.asc(), Submission.id.asc()))

    def reversed(self) -> SubmissionQuery:
        return SubmissionQuery(self.statement.order_by(Submission.created_at.desc(), Submission.id.desc()))

    def not_commented_on_by(self, user: User) -> SubmissionQuery:
        commented = exists().where(Comment.submission_id == Submission.id, Comment.user_id == user.id)
        return self._where(~commented)

    def not_liked_by(self, user: User) -> SubmissionQuery:
        liked = exists().where(Like.submission_id == Submission.id, Like.user_id == user.id)
        return self._where(~liked)

    def unmuted_for(self, user: User) -> SubmissionQuery:
        muted = exists().where(Mute.submission_id == Submission.id, Mute.user_id == user.id)
        return self._where(~muted)

    def not_submitted_by(self, user: User) -> SubmissionQuery:
        return self._where(Submission.user_id != user.id)

    excluding = not_submitted_by

    def between(self, upper_bound: datetime, lower_bound: datetime) -> SubmissionQuery:
        return self._where(Submission.created_at < upper_bound, Submission.created_at > lower_bound)

    def older_than(self, timestamp: datetime) -> SubmissionQuery:
        return self._where(Submission.created_at < timestamp)

    def since(self, timestamp: datetime) -> SubmissionQuery:
        return self._where(Submission.created_at > timestamp)

    def for_language(self, language: str) -> SubmissionQuery:
        return self._where(Submission.language == language)

    def recent(self, now: datetime | None = None) -> SubmissionQuery:
        return self.since((now or utcnow()) - recent_window())

    def for_exercise(self, exercise: ExerciseRef) -> SubmissionQuery:
        return self._where(Submission.language == exercise.track_id, Submission.slug == exercise.slug)

    def completed_for(self, exercise: ExerciseRef) -> SubmissionQuery:
        return self.done().for_exercise(exercise)

    def related_to(self, submission: Submission) -> SubmissionQuery:
        """Every version of the same exercise by the same user, oldest first."""
        return self._where(
            Submission.user_id == submission.user_id,
            Submission.language == submission.language,
            Submission.slug == submission.slug,
        ).chronological()

    def with_version(self, version: int) -> SubmissionQuery:
        return self._where(Submission.version == version)

    def limit(self, count: int) -> SubmissionQuery:
        return SubmissionQuery(self.statement.limit(count))

    async def all(self, session: AsyncSession) -> list[Submission]:
        async with persistence_guard(session):
            rows = await session.scalars(self.statement)
            return list(rows.all())

    async def first(self, session: AsyncSession) -> Submission | None:
        async with persistence_guard(session):
            rows = await session.scalars(self.statement.limit(1))
            return rows.first()

    async def count(self, session: AsyncSession) -> int:
        counted = select(func.count()).select_from(self.statement.order_by(None).subquery())
        async with persistence_guard(session):
            total = await session.scalar(counted)
        return int(total or 0)


async def random_completed_for(
    session: AsyncSession,
    exercise: ExerciseRef,
    *,
    rng: random.Random | None = None,
) -> Submission | None:
    """Pick one finished submission of ``exercise`` uniformly at random, or None."""
    candidates = SubmissionQuery().completed_for(exercise).statement
    candidates = candidates.with_only_columns(Submission.id).order_by(Submission.id.asc())
    async with persistence_guard(session):
        submission_ids = list((await session.scalars(candidates)).all())
        if not submission_ids:
            return None
        chosen = (rng or random.Random()).choice(submission_ids)
        return await session.get(Submission, chosen)
