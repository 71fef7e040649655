from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.exc import OperationalError

from solution_review.db import persistence_guard
from solution_review.exceptions import PersistenceError


class _RecordingSession:
    def __init__(self) -> None:
        self.rolled_back = False

    async def rollback(self) -> None:
        self.rolled_back = True


def test_persistence_guard_rolls_back_and_wraps_store_errors() -> None:
    session = _RecordingSession()

    async def scenario() -> None:
        async with persistence_guard(session):
            raise OperationalError("UPDATE submissions", {}, Exception("connection reset"))

    with pytest.raises(PersistenceError) as excinfo:
        asyncio.run(scenario())

    assert session.rolled_back
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_persistence_guard_leaves_other_errors_alone() -> None:
    session = _RecordingSession()

    async def scenario() -> None:
        async with persistence_guard(session):
            raise KeyError("slug")

    with pytest.raises(KeyError):
        asyncio.run(scenario())

    assert not session.rolled_back
