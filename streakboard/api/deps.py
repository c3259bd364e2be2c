"""
streakboard.api.deps — FastAPI dependency injection
====================================================

The API runs in its own process and never touches the bot's live
ledger.  Each request rebuilds a read-only core from the latest
snapshot in the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy import Engine

from streakboard.database.engine import create_db_engine
from streakboard.engine.ledger import Ledger
from streakboard.engine.wake import WakeOrderTracker
from streakboard.services.snapshot_service import restore_snapshot


@dataclass(slots=True)
class CoreView:
    ledger: Ledger
    wake: WakeOrderTracker
    has_snapshot: bool


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


def get_core(engine: Annotated[Engine, Depends(get_engine)]) -> CoreView:
    ledger = Ledger()
    wake = WakeOrderTracker(ledger)
    found = restore_snapshot(engine, ledger, wake)
    return CoreView(ledger=ledger, wake=wake, has_snapshot=found)
