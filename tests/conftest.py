"""Shared test fixtures for the tipping game."""

from datetime import datetime
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tipster.config import ScoringConfig, UK_TZ
from tipster.models.database import Base
from tipster.models import tipping  # noqa: F401  # registers models
from tipster.scoring.types import FullResult, Placement, Race

ADMIN_EMAIL = "admin@example.com"

# 2026-01-13 14:25 GMT
LOCK_DAY_ONE = int(datetime(2026, 1, 13, 14, 25, tzinfo=UK_TZ).timestamp() * 1000)
LOCK_DAY_TWO = int(datetime(2026, 1, 14, 14, 25, tzinfo=UK_TZ).timestamp() * 1000)


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def config() -> ScoringConfig:
    return ScoringConfig(admin_emails=(ADMIN_EMAIL,))


@pytest.fixture
def races() -> list[Race]:
    """Two races on the first day, one on the second."""
    return [
        Race(
            id="race-1",
            name="Kempton 14:30",
            date="2026-01-13",
            lock_at=LOCK_DAY_ONE,
            horses=("Red Comet", "Blue Derby", "Night Runner", "Golden Gale"),
        ),
        Race(
            id="race-2",
            name="Cheltenham 15:05",
            date="2026-01-13",
            lock_at=LOCK_DAY_ONE,
            horses=("Silver Arrow", "Misty Ridge", "King’s Honour", "River Jet"),
        ),
        Race(
            id="race-3",
            name="Cheltenham 13:30",
            date="2026-01-14",
            lock_at=LOCK_DAY_TWO,
            horses=("Fast Eddie", "Slow Sally", "Mud Lark"),
        ),
    ]


@pytest.fixture
def race_one_result() -> FullResult:
    """Red Comet wins at 5/1, Blue Derby 2nd at 3/1, Night Runner 3rd, Golden Gale 4th."""
    return FullResult(
        placements=(
            Placement(1, "Red Comet", 6.0, "5/1"),
            Placement(2, "Blue Derby", 4.0, "3/1"),
            Placement(3, "Night Runner", 9.0, "8/1"),
            Placement(4, "Golden Gale", 3.0, "2/1"),
        ),
        places_paid=3,
        each_way_fraction=0.25,
        winner_horse="Red Comet",
    )

