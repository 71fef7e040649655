from __future__ import annotations

from _factories import REFERENCE_NOW, days_ago, make_user
from solution_review.inbox import Inbox
from solution_review.models import Alert, Notification


def test_inbox_counts_alerts_and_unread_recent_submission_notifications(run_db) -> None:
    async def scenario(session):
        alice = await make_user(session, "alice")
        bob = await make_user(session, "bob")
        session.add_all(
            [
                Alert(user_id=alice.id, text="new track launched", created_at=days_ago(40)),
                Alert(user_id=alice.id, text="mentor feedback", created_at=days_ago(1)),
                Alert(user_id=bob.id, text="not alice's", created_at=days_ago(1)),
                Notification(user_id=alice.id, item_id=1, created_at=days_ago(1)),
                Notification(user_id=alice.id, item_id=2, created_at=days_ago(6)),
                Notification(user_id=alice.id, item_id=3, read=True, created_at=days_ago(1)),
                Notification(user_id=alice.id, item_id=4, created_at=days_ago(8)),
                Notification(user_id=bob.id, item_id=5, created_at=days_ago(1)),
            ]
        )
        await session.commit()

        inbox = Inbox(session, alice, now=REFERENCE_NOW)
        return (
            await inbox.alert_count(),
            await inbox.notification_count(),
            await inbox.count(),
            await inbox.has_stuff(),
            await inbox.summary(),
        )

    alerts, notifications, total, has_stuff, summary = run_db(scenario)

    assert (alerts, notifications, total) == (2, 2, 4)
    assert has_stuff
    assert summary.count == 4
    assert summary.has_alerts and summary.has_notifications


def test_inbox_with_only_stale_or_read_notifications_is_empty(run_db) -> None:
    async def scenario(session):
        carol = await make_user(session, "carol")
        session.add_all(
            [
                Notification(user_id=carol.id, item_id=1, read=True, created_at=days_ago(1)),
                Notification(user_id=carol.id, item_id=2, created_at=days_ago(30)),
            ]
        )
        await session.commit()

        inbox = Inbox(session, carol, now=REFERENCE_NOW)
        return await inbox.count(), await inbox.has_notifications(), await inbox.has_alerts(), await inbox.has_stuff()

    assert run_db(scenario) == (0, False, False, False)


def test_inbox_alerts_alone_count_as_stuff(run_db) -> None:
    async def scenario(session):
        dave = await make_user(session, "dave")
        session.add(Alert(user_id=dave.id, text="welcome", created_at=REFERENCE_NOW))
        await session.commit()

        inbox = Inbox(session, dave, now=REFERENCE_NOW)
        return await inbox.has_notifications(), await inbox.has_alerts(), await inbox.has_stuff()

    assert run_db(scenario) == (False, True, True)
