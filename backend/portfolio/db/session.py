from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from ..core.config import settings

DATABASE_URL = settings.database_url


class Base(DeclarativeBase):
    pass


def _engine_kwargs(url: str) -> dict:
    kwargs: dict = {"echo": False}
    if url.startswith("sqlite+aiosqlite"):
        connect_args = {"check_same_thread": False}
        # sqlite+aiosqlite:///file:memdb1?mode=memory&cache=shared&uri=true needs the driver in URI mode
        if "file:" in url or "uri=true" in url:
            connect_args["uri"] = True
        kwargs["connect_args"] = connect_args
        # a plain :memory: database only survives on a single shared connection
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_async_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

async_session = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
