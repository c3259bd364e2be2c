"""
streakboard.bridge — Sync → async bridge
========================================

Discord handlers run on the ``asyncio`` event loop, while the ledger
serializes access with a ``threading`` lock and SQLAlchemy is
synchronous.  Calling either directly from a coroutine would stall the
loop whenever the lock is contended or a query is slow.

So every blocking call from a cog goes through :func:`run_blocking`,
which ships it to the default thread pool::

    res = await run_blocking(ledger.award_daily_points, user_id, name, today)
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")


async def run_blocking(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a synchronous callable on a worker thread and await its result."""
    return await asyncio.to_thread(func, *args, **kwargs)
