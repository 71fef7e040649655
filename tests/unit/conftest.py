from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from solution_review.db import Base

SessionFactory = async_sessionmaker[AsyncSession]


def _run_against(url: str, scenario: Callable[[SessionFactory], Awaitable[Any]]) -> Any:
    async def _main() -> Any:
        engine = create_async_engine(url)
        async with engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)
        try:
            return await scenario(async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False))
        finally:
            await engine.dispose()

    return asyncio.run(_main())


@pytest.fixture()
def run_db(tmp_path: Path) -> Callable[[Callable[[AsyncSession], Awaitable[Any]]], Any]:
    """Run an async scenario against a fresh sqlite database and return its result."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'review.db'}"

    def _run(scenario: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async def _with_session(session_factory: SessionFactory) -> Any:
            async with session_factory() as session:
                return await scenario(session)

        return _run_against(url, _with_session)

    return _run


@pytest.fixture()
def run_db_sessions(tmp_path: Path) -> Callable[[Callable[[SessionFactory], Awaitable[Any]]], Any]:
    """Like ``run_db`` but hands the scenario a session factory, for multi-session flows."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'review.db'}"

    def _run(scenario: Callable[[SessionFactory], Awaitable[Any]]) -> Any:
        return _run_against(url, scenario)

    return _run
