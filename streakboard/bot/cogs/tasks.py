"""
streakboard.bot.cogs.tasks — Periodic Background Tasks
=======================================================

Scheduled jobs that run on ``discord.ext.tasks`` loops:

- **Daily trigger** — once a day at ``daily_task_time`` (local time).  On
  the first of a month it posts the wake-up lyrics to the wake channel,
  closes the previous month if no check-in has done so yet, and posts the
  month-end (and, in January, year-end) summary to the gym channel.
- **Snapshot** — every ``snapshot_interval_minutes`` when persistence is
  enabled, writes the core state to the database.

These run in the bot process and reach the core only through its public
operations, via ``run_blocking``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import TYPE_CHECKING

from discord.ext import commands, tasks

from streakboard.bot.core import send_text
from streakboard.bridge import run_blocking
from streakboard.constants import FIRST_OF_MONTH_LYRICS
from streakboard.engine.ledger import ClosedPeriod, Month
from streakboard.services.reports import build_closed_period_reports

if TYPE_CHECKING:
    from streakboard.bot.core import StreakboardBot

logger = logging.getLogger(__name__)


def close_previous_month(bot: StreakboardBot, today: date) -> ClosedPeriod | None:
    """Roll the ledger into *today*'s month and return the month just before it.

    Returns None when the ledger holds no closed record of that month
    (e.g. the bot was started this month).
    """
    ledger = bot.ledger
    with ledger.lock:
        ledger.rollover_if_needed(today)
        closed = ledger.last_closed
    if closed is None or closed.month != Month.from_date(today).previous():
        return None
    return closed


class PeriodicTasks(commands.Cog):
    """Cog for the daily announcement and state snapshots."""

    def __init__(self, bot: StreakboardBot) -> None:
        self.bot = bot

    async def cog_load(self) -> None:
        """Apply configured schedules and start the loops."""
        cfg = self.bot.cfg
        self.daily_loop.change_interval(time=cfg.daily_task_time.replace(tzinfo=cfg.tz))
        self.daily_loop.start()

        if self.bot.engine is not None:
            self.snapshot_loop.change_interval(minutes=cfg.snapshot_interval_minutes)
            self.snapshot_loop.start()
        else:
            logger.warning("DATABASE_URL not set — state lives in memory only")

    async def cog_unload(self) -> None:
        self.daily_loop.cancel()
        self.snapshot_loop.cancel()

    # -------------------------------------------------------------------
    # Daily trigger
    # -------------------------------------------------------------------
    @tasks.loop(time=time(7, 0))
    async def daily_loop(self):
        """First-of-month lyrics and period summaries."""
        today = datetime.now(self.bot.cfg.tz).date()
        if today.day != 1:
            return

        try:
            await self._first_of_month(today)
        except Exception:
            logger.exception("Daily task failed", extra={"task": "daily"})

    async def _first_of_month(self, today: date) -> None:
        wake_channel = self.bot.find_text_channel(self.bot.cfg.wake_channel_name)
        if wake_channel is None:
            logger.warning("Wake channel %r not found", self.bot.cfg.wake_channel_name)
        else:
            await send_text(wake_channel, FIRST_OF_MONTH_LYRICS)

        closed = await run_blocking(close_previous_month, self.bot, today)
        if closed is None:
            logger.info("No closed month to report for %s", today)
            return

        gym_channel = self.bot.find_text_channel(self.bot.cfg.gym_channel_name)
        if gym_channel is None:
            logger.warning("Gym channel %r not found", self.bot.cfg.gym_channel_name)
            return
        for report in build_closed_period_reports(closed):
            await send_text(gym_channel, report)
        logger.info("Posted month-end summary for %s", closed.month)

    @daily_loop.before_loop
    async def _wait_daily(self):
        await self.bot.wait_until_ready()

    # -------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------
    @tasks.loop(minutes=10)
    async def snapshot_loop(self):
        """Persist the core state."""
        await self.bot.save_state()

    @snapshot_loop.before_loop
    async def _wait_snapshot(self):
        await self.bot.wait_until_ready()


async def setup(bot: StreakboardBot) -> None:
    await bot.add_cog(PeriodicTasks(bot))
