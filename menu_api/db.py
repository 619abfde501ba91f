from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from menu_api.core.config import settings
from menu_api.models.base import Base

# Create engine
engine = create_async_engine(settings.database_url, echo=settings.db_echo, pool_pre_ping=True)

# Async session maker
async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Dependency
async def get_db():
    async with async_session() as session:
        yield session

async def create_db_and_tables():
    import menu_api.models  # registers Menu on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
