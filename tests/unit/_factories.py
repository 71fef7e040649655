from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from solution_review.lifecycle import submit_for
from solution_review.models import Comment, Submission, User
from solution_review.schemas import ExerciseRef

REFERENCE_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
BOB = ExerciseRef(track_id="python", slug="bob")
LEAP = ExerciseRef(track_id="ruby", slug="leap")


def days_ago(days: float) -> datetime:
    return REFERENCE_NOW - timedelta(days=days)


async def make_user(session: AsyncSession, username: str) -> User:
    user = User(username=username)
    session.add(user)
    await session.commit()
    return user


async def make_submission(
    session: AsyncSession,
    user: User,
    exercise: ExerciseRef = BOB,
    *,
    created_at: datetime | None = None,
    state: str | None = None,
    nit_count: int = 0,
) -> Submission:
    submission = await submit_for(session, user, exercise, now=created_at or REFERENCE_NOW)
    if state is not None:
        submission.state = state
    submission.nit_count = nit_count
    await session.commit()
    return submission


async def add_comments(session: AsyncSession, submission: Submission, user: User, count: int) -> None:
    for index in range(count):
        session.add(
            Comment(
                submission_id=submission.id,
                user_id=user.id,
                body=f"nit {index}",
                created_at=REFERENCE_NOW + timedelta(minutes=index),
            )
        )
    await session.commit()
