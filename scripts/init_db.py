# scripts/init_db.py
import asyncio
import logging

from menu_api.db import engine
# Importing the package registers Menu on Base.metadata
from menu_api.models import Base

log = logging.getLogger(__name__)


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("All missing tables created.")
    await engine.dispose()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_tables())
