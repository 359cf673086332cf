"""
Shared fixtures: a throwaway SQLite database and an ASGI test client.

Environment is set before any gameportal import so the cached settings and
the module-level engine pick it up.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="gameportal-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["LOG_DIR"] = ""
os.environ["LOG_LEVEL"] = "DEBUG"

import pytest
import httpx

from gameportal.database import Base, engine, async_session_maker
from gameportal import models  # noqa: F401
from gameportal.main import app
from gameportal.models import Category, Game
from gameportal.services import admin_service


@pytest.fixture(autouse=True)
async def db_schema():
    """Fresh tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def session():
    async with async_session_maker() as s:
        yield s


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture
async def admin_token():
    async with async_session_maker() as s:
        admin, _ = await admin_service.get_or_create_admin(s, "admin")
        token = await admin_service.rotate_token(s, admin)
        await s.commit()
    return token


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
async def game_id():
    """A published game committed to the database."""
    async with async_session_maker() as s:
        game = Game(title="Portal", description="Puzzle game with portals", publish_status=True)
        s.add(game)
        await s.commit()
        return game.id


@pytest.fixture
async def category_ids():
    async with async_session_maker() as s:
        cats = [Category(name="Puzzle"), Category(name="Action"), Category(name="Arcade")]
        s.add_all(cats)
        await s.commit()
        return [c.id for c in cats]
