from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from barakaflow.config import settings


def async_database_url(url: str) -> str:
    # Ensure we use the async driver
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def make_engine(url: str) -> AsyncEngine:
    url = async_database_url(url)
    if url.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them
        return create_async_engine(url, echo=False, poolclass=NullPool)
    return create_async_engine(url, echo=False)


SQLALCHEMY_DATABASE_URL = async_database_url(settings.database_url)

engine = make_engine(SQLALCHEMY_DATABASE_URL)

# Async session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

Base = declarative_base()

async def init_models(bind: AsyncEngine = engine):
    # Import models so they register on Base.metadata
    from barakaflow.models import task, user  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def get_db():
    async with AsyncSessionLocal() as db:
        try:
            yield db
        finally:
            await db.close()
