from __future__ import annotations

from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from solution_review.clock import utcnow
from solution_review.config import recent_window
from solution_review.db import persistence_guard
from solution_review.models import Alert, Notification, NotificationItemType, User
from solution_review.schemas import InboxSummary


class Inbox:
    """Counts of what is waiting for a user: alerts plus unread submission notifications."""

    def __init__(self, session: AsyncSession, user: User, *, now: datetime | None = None) -> None:
        self.session = session
        self.user = user
        self.now = now

    def alerts(self) -> Select:
        return select(Alert).where(Alert.user_id == self.user.id)

    def notifications(self) -> Select:
        since = (self.now or utcnow()) - recent_window()
        return select(Notification).where(
            Notification.user_id == self.user.id,
            Notification.item_type == NotificationItemType.SUBMISSION.value,
            Notification.read.is_(False),
            Notification.created_at > since,
        )

    async def _count(self, statement: Select) -> int:
        async with persistence_guard(self.session):
            total = await self.session.scalar(select(func.count()).select_from(statement.subquery()))
        return int(total or 0)

    async def alert_count(self) -> int:
        return await self._count(self.alerts())

    async def notification_count(self) -> int:
        return await self._count(self.notifications())

    async def count(self) -> int:
        return await self.alert_count() + await self.notification_count()

    async def has_alerts(self) -> bool:
        return await self.alert_count() > 0

    async def has_notifications(self) -> bool:
        return await self.notification_count() > 0

    async def has_stuff(self) -> bool:
        return await self.has_notifications() or await self.has_alerts()

    async def summary(self) -> InboxSummary:
        alerts = await self.alert_count()
        notifications = await self.notification_count()
        return InboxSummary(
            count=alerts + notifications,
            has_alerts=alerts > 0,
            has_notifications=notifications > 0,
        )
