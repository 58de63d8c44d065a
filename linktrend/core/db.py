import uuid
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from linktrend.core.config import settings


class Base(DeclarativeBase):
    pass


class Database:
    """
    Owns the engine and session factory for the process.
    Created by the app factory, connected on startup and disposed on shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    def connect(self) -> None:
        if self.engine is not None:
            return
        self.engine = create_async_engine(self.url, echo=self.echo, pool_pre_ping=True)
        self.session_factory = async_sessionmaker(self.engine, expire_on_commit=False)

    async def disconnect(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.session_factory = None

    def session(self) -> AsyncSession:
        if self.session_factory is None:
            self.connect()
        return self.session_factory()


database = Database(settings.async_database_url)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


def parse_uuid(value) -> Optional[uuid.UUID]:
    """Returns None for anything that is not a valid UUID."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None
