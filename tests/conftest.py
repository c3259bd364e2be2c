"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from streakboard.config import StreakboardConfig
from streakboard.database.models import Base
from streakboard.engine.ledger import Ledger
from streakboard.engine.wake import WakeOrderTracker

OWNER_ID = "999"
GYM_CHANNEL = "╠►pumper"
WAKE_CHANNEL = "╠►frühe-vögel"
START = date(2026, 1, 15)


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all snapshot tables.

    StaticPool so every thread (``asyncio.to_thread``, TestClient) shares
    the same in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def cfg() -> StreakboardConfig:
    return StreakboardConfig(
        community_name="Test Crew",
        bot_prefix="!",
        guild_id=100,
        owner_id=OWNER_ID,
        gym_channel_name=GYM_CHANNEL,
        wake_channel_name=WAKE_CHANNEL,
    )


@pytest.fixture
def ledger() -> Ledger:
    """A fresh ledger positioned in January 2026."""
    return Ledger(points_per_award=10, today=START)


@pytest.fixture
def wake(ledger: Ledger) -> WakeOrderTracker:
    return WakeOrderTracker(ledger)
