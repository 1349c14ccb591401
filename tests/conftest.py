"""Shared fixtures: an in-memory database and institutions under each country."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("APP_ENV", "development")

import pytest_asyncio
from sqlalchemy.pool import StaticPool

from scholaris.database import create_engine, create_session_factory, init_db
from scholaris.models import GradingSystem
from scholaris.services.institution_service import get_institution_service
from scholaris.utils.tenant_context import clear_institution_context


@pytest_asyncio.fixture
async def engine():
    engine = create_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session
    clear_institution_context()


@pytest_asyncio.fixture
async def do_institution(db):
    """A Dominican primary school."""
    return await get_institution_service().create_institution(
        db, "Colegio San Juan", GradingSystem.PRIMARIA_DO
    )


@pytest_asyncio.fixture
async def ht_institution(db):
    """A Haitian secondary school."""
    return await get_institution_service().create_institution(
        db, "Lycée Pétion", GradingSystem.SECUNDARIA_HT
    )
