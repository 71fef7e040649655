from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from solution_review.config import DATABASE_URL, SQL_ECHO
from solution_review.exceptions import PersistenceError


class Base(DeclarativeBase):
    pass


engine = create_async_engine(DATABASE_URL, pool_pre_ping=True, echo=SQL_ECHO)
AsyncSessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def persistence_guard(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Roll back and re-raise store failures as PersistenceError."""
    try:
        yield session
    except SQLAlchemyError as exc:
        await session.rollback()
        raise PersistenceError(str(exc)) from exc
