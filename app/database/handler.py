from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool


class AsyncHandler(object):
    """
    Database handler for asyncronous querying.
    """

    def __init__(self, session_local) -> None:
        self.session_local = session_local

    def add(self, session: AsyncSession, instance: Any):
        session.add(instance)

    async def execute(self, session: AsyncSession, statement: Any):
        result = await session.execute(statement)
        return result

    async def refresh(self, session: AsyncSession, instance: Any):
        await session.refresh(instance)

    async def commit(self, session: AsyncSession):
        await session.commit()

    def method_with_session(self, method):
        session_local = self.session_local

        async def wrapper(self, *args, **kwargs):
            async with session_local() as session:
                return await method(self, session, *args, **kwargs)

        return wrapper


class Database(object):
    """
    Abstraction layer for initializing
    database parameters such as SessionLocal
    and the db handler.
    """

    engine_options = {
        "pool_recycle": 3600
    }

    @staticmethod
    def declarative_base():
        return declarative_base()

    @staticmethod
    def init_db(db_url: str):
        # sqlite connections must not outlive the event loop that opened them
        options = {"poolclass": NullPool} if db_url.startswith("sqlite") else Database.engine_options
        engine = create_async_engine(db_url, **options)

        SessionLocal = async_sessionmaker(
            autocommit=False, autoflush=False, bind=engine, class_=AsyncSession, expire_on_commit=False
        )

        db_handler = AsyncHandler(SessionLocal)

        return engine, SessionLocal, db_handler
