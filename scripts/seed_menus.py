"""
Seed a small demo menu tree.

Goes through the crud layer so slugs, ordering and paths are computed the same
way the API does it. Skips seeding when any menu already exists.

Usage: python scripts/seed_menus.py
"""

import asyncio
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy import select

from menu_api.crud import menu as menu_crud
from menu_api.db import async_session, create_db_and_tables
from menu_api.models import Menu
from menu_api.schemas import MenuCreate

log = logging.getLogger(__name__)

DEMO_TREE = {
    "Home": [],
    "Shop": {
        "Coffee": ["Espresso", "Filter Coffee"],
        "Tea": [],
        "Gift Cards": [],
    },
    "About Us": ["Team", "Careers"],
    "Contact": [],
}


async def _seed_level(session, children, parent_id=None):
    items = children.items() if isinstance(children, dict) else ((name, []) for name in children)
    created = 0
    for name, grandchildren in items:
        node = await menu_crud.create_menu(session, MenuCreate(name=name, parent_id=parent_id))
        created += 1 + await _seed_level(session, grandchildren, node.id)
    return created


async def seed_menus():
    await create_db_and_tables()

    async with async_session() as session:
        result = await session.execute(select(Menu.id).limit(1))
        if result.scalar_one_or_none() is not None:
            log.warning("Menus already exist. Skipping seed.")
            return

        created = await _seed_level(session, DEMO_TREE)
        log.info("Created %s menus", created)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed_menus())
