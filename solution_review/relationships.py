from __future__ import annotations

import logging

from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from solution_review.db import persistence_guard
from solution_review.exceptions import PersistenceError
from solution_review.models import Like, Mute, Submission, SubmissionViewer, User
from solution_review.observability import get_logger, log_event

logger = get_logger()


async def _has_like(session: AsyncSession, submission: Submission, user: User) -> bool:
    return bool(
        await session.scalar(
            select(exists().where(Like.submission_id == submission.id, Like.user_id == user.id))
        )
    )


async def _has_mute(session: AsyncSession, submission: Submission, user: User) -> bool:
    return bool(
        await session.scalar(
            select(exists().where(Mute.submission_id == submission.id, Mute.user_id == user.id))
        )
    )


async def _has_viewer(session: AsyncSession, submission: Submission, user: User) -> bool:
    return bool(
        await session.scalar(
            select(
                exists().where(
                    SubmissionViewer.submission_id == submission.id,
                    SubmissionViewer.viewer_id == user.id,
                )
            )
        )
    )


async def _add_mute(session: AsyncSession, submission: Submission, user: User) -> None:
    if not await _has_mute(session, submission, user):
        session.add(Mute(submission_id=submission.id, user_id=user.id))


async def _remove_mute(session: AsyncSession, submission: Submission, user: User) -> None:
    await session.execute(delete(Mute).where(Mute.submission_id == submission.id, Mute.user_id == user.id))


async def like(session: AsyncSession, submission: Submission, user: User) -> Submission:
    """Like a submission; liking also mutes further nit notifications for the liker."""
    async with persistence_guard(session):
        session.add(submission)
        if await _has_like(session, submission, user):
            return submission
        session.add(Like(submission_id=submission.id, user_id=user.id))
        submission.is_liked = True
        await _add_mute(session, submission, user)
        await session.commit()
    return submission


async def unlike(session: AsyncSession, submission: Submission, user: User) -> Submission:
    """Withdraw a like and the mute it implied.

    The mute is removed even if the user had muted the submission on their own
    before liking it.
    """
    async with persistence_guard(session):
        session.add(submission)
        if not await _has_like(session, submission, user):
            return submission
        await session.execute(delete(Like).where(Like.submission_id == submission.id, Like.user_id == user.id))
        remaining = await session.scalar(select(func.count(Like.id)).where(Like.submission_id == submission.id))
        submission.is_liked = int(remaining or 0) > 0
        await _remove_mute(session, submission, user)
        await session.commit()
    return submission


async def is_liked_by(session: AsyncSession, submission: Submission, user: User) -> bool:
    async with persistence_guard(session):
        return await _has_like(session, submission, user)


async def liked_by(session: AsyncSession, submission: Submission) -> list[User]:
    async with persistence_guard(session):
        rows = await session.scalars(
            select(User).join(Like, Like.user_id == User.id).where(Like.submission_id == submission.id).order_by(Like.id)
        )
        return list(rows.all())


async def mute(session: AsyncSession, submission: Submission, user: User) -> None:
    async with persistence_guard(session):
        await _add_mute(session, submission, user)
        await session.commit()


async def unmute(session: AsyncSession, submission: Submission, user: User) -> None:
    async with persistence_guard(session):
        await _remove_mute(session, submission, user)
        await session.commit()


async def unmute_all(session: AsyncSession, submission: Submission) -> None:
    async with persistence_guard(session):
        await session.execute(delete(Mute).where(Mute.submission_id == submission.id))
        await session.commit()


async def is_muted_by(session: AsyncSession, submission: Submission, user: User) -> bool:
    async with persistence_guard(session):
        return await _has_mute(session, submission, user)


async def muted_by(session: AsyncSession, submission: Submission) -> list[User]:
    async with persistence_guard(session):
        rows = await session.scalars(
            select(User).join(Mute, Mute.user_id == User.id).where(Mute.submission_id == submission.id).order_by(Mute.id)
        )
        return list(rows.all())


async def view(session: AsyncSession, submission: Submission, user: User) -> None:
    # Best effort: a failed view record must never fail the request that showed the submission.
    try:
        if await _has_viewer(session, submission, user):
            return
        session.add(SubmissionViewer(submission_id=submission.id, viewer_id=user.id))
        await session.commit()
    except (SQLAlchemyError, PersistenceError) as exc:
        await session.rollback()
        log_event(
            logger,
            "submission.view_failed",
            level=logging.WARNING,
            submission_id=submission.id,
            user_id=user.id,
            error=f"{exc.__class__.__name__}: {exc}",
        )


async def view_count(session: AsyncSession, submission: Submission) -> int:
    async with persistence_guard(session):
        total = await session.scalar(
            select(func.count(SubmissionViewer.id)).where(SubmissionViewer.submission_id == submission.id)
        )
    return int(total or 0)


async def viewers(session: AsyncSession, submission: Submission) -> list[User]:
    async with persistence_guard(session):
        rows = await session.scalars(
            select(User)
            .join(SubmissionViewer, SubmissionViewer.viewer_id == User.id)
            .where(SubmissionViewer.submission_id == submission.id)
            .order_by(SubmissionViewer.id)
        )
        return list(rows.all())
