from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from app.config import config

engine = create_async_engine(
    config.DATABASE_URL,
    echo=config.DB_ECHO,
    future=True,
    connect_args={"ssl": True} if config.DB_SSL else {},
    execution_options={"compiled_cache": None},
)

SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    async with SessionLocal() as session:
        yield session


def get_session_factory() -> async_sessionmaker:
    """Session factory for background work that must open its own session."""
    return SessionLocal


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    await engine.dispose()
