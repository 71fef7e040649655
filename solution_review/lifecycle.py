from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from solution_review.clock import as_utc, utcnow
from solution_review.db import persistence_guard
from solution_review.exceptions import NotFoundError, ValidationError
from solution_review.models import (
    Comment,
    Like,
    Mute,
    Notification,
    NotificationItemType,
    Submission,
    SubmissionState,
    SubmissionViewer,
    User,
)
from solution_review.observability import get_logger, log_event
from solution_review.queries import SubmissionQuery
from solution_review.schemas import ExerciseRef

logger = get_logger()


async def submit_for(
    session: AsyncSession,
    user: User | None,
    exercise: ExerciseRef,
    *,
    solution: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> Submission:
    """Create the next version of ``user``'s attempt at ``exercise``.

    Not idempotent: every call creates a new submission one version higher.
    """
    if user is None:
        raise ValidationError("submission requires a user")

    submission = Submission(
        key=uuid4().hex,
        user_id=user.id,
        language=exercise.track_id,
        slug=exercise.slug,
        solution=solution,
        state=SubmissionState.PENDING.value,
        nit_count=0,
        is_liked=False,
        done_at=None,
        created_at=now or utcnow(),
    )
    async with persistence_guard(session):
        prior_count = await SubmissionQuery().related_to(submission).count(session)
        submission.version = prior_count + 1
        session.add(submission)
        await session.commit()

    log_event(
        logger,
        "submission.created",
        submission_key=submission.key,
        user_id=submission.user_id,
        track_id=submission.language,
        slug=submission.slug,
        version=submission.version,
    )
    return submission


async def supersede(session: AsyncSession, submission: Submission) -> Submission:
    async with persistence_guard(session):
        session.add(submission)
        submission.state = SubmissionState.SUPERSEDED.value
        submission.done_at = None
        await session.commit()
    log_event(logger, "submission.superseded", submission_key=submission.key, version=submission.version)
    return submission


async def get_by_key(session: AsyncSession, key: str) -> Submission:
    async with persistence_guard(session):
        submission = await session.scalar(select(Submission).where(Submission.key == key))
    if submission is None:
        raise NotFoundError(f"submission not found: {key}")
    return submission


async def comment_count(session: AsyncSession, submission: Submission) -> int:
    async with persistence_guard(session):
        total = await session.scalar(
            select(func.count(Comment.id)).where(Comment.submission_id == submission.id)
        )
    return int(total or 0)


async def discussion_involves_user(session: AsyncSession, submission: Submission) -> bool:
    """Someone has replied since the last nit was recorded."""
    return submission.nit_count < await comment_count(session, submission)


def is_older_than(submission: Submission, age: timedelta, *, now: datetime | None = None) -> bool:
    return as_utc(submission.created_at) < as_utc(now or utcnow()) - age


async def related_versions(session: AsyncSession, submission: Submission) -> list[Submission]:
    return await SubmissionQuery().related_to(submission).all(session)


async def prior_version(session: AsyncSession, submission: Submission) -> Submission | None:
    query = SubmissionQuery().related_to(submission).with_version(submission.version - 1)
    return await query.first(session)


async def delete_submission(session: AsyncSession, submission: Submission) -> None:
    """Delete a submission together with everything it owns, in one transaction."""
    submission_id, key = submission.id, submission.key
    async with persistence_guard(session):
        await session.execute(delete(Comment).where(Comment.submission_id == submission_id))
        await session.execute(
            delete(Notification).where(
                Notification.item_type == NotificationItemType.SUBMISSION.value,
                Notification.item_id == submission_id,
            )
        )
        await session.execute(delete(SubmissionViewer).where(SubmissionViewer.submission_id == submission_id))
        await session.execute(delete(Mute).where(Mute.submission_id == submission_id))
        await session.execute(delete(Like).where(Like.submission_id == submission_id))
        await session.execute(delete(Submission).where(Submission.id == submission_id))
        await session.commit()
    log_event(logger, "submission.deleted", submission_key=key, submission_id=submission_id)
