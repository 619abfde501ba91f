"""Shared fixtures: a throwaway SQLite database per test and an ASGI client bound to it."""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from menu_api.crud import menu as menu_crud
from menu_api.db import get_db
from menu_api.main import app
from menu_api.models import Base
from menu_api.schemas import MenuCreate


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'menus.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def make_menu(db):
    """Create a menu through the crud layer: ``await make_menu("Shop", parent=root)``."""

    async def _make(name, parent=None, **fields):
        payload = MenuCreate(name=name, parent_id=parent.id if parent else None, **fields)
        return await menu_crud.create_menu(db, payload)

    return _make


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
