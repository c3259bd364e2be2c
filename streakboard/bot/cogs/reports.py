"""
streakboard.bot.cogs.reports — Ranking & Summary Commands
==========================================================

Slash commands anyone can use:
- /rank — current monthly ranking
- /yearrank — current yearly ranking
- /wakeorder — today's wake-up order
- /payouts — how the pot would be split right now
- /monthend — month-end summary of the running month (preview)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from streakboard.bot.core import split_message
from streakboard.bridge import run_blocking
from streakboard.services.reports import (
    build_month_end_report,
    build_monthly_ranking_report,
    build_payouts_report,
    build_wake_order_report,
    build_yearly_ranking_report,
)

if TYPE_CHECKING:
    from streakboard.bot.core import StreakboardBot


class Reports(commands.Cog, name="Reports"):
    """Read-only leaderboards and summaries."""

    def __init__(self, bot: StreakboardBot) -> None:
        self.bot = bot

    async def _send(self, interaction: discord.Interaction, text: str) -> None:
        first, *rest = split_message(text) or [""]
        await interaction.response.send_message(first)
        for chunk in rest:
            await interaction.followup.send(chunk)

    # -------------------------------------------------------------------
    # Sync builders (run on a worker thread)
    # -------------------------------------------------------------------
    def _month_end_preview(self) -> str:
        ledger = self.bot.ledger
        with ledger.lock:
            ranking = ledger.monthly_ranking()
            return build_month_end_report(
                ranking, ledger.current_month, ledger.payout_plan(ranking)
            )

    def _payouts(self) -> str:
        return build_payouts_report(self.bot.ledger.payout_plan())

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    @app_commands.command(name="rank", description="Show this month's ranking.")
    async def rank(self, interaction: discord.Interaction) -> None:
        ranking = await run_blocking(self.bot.ledger.monthly_ranking)
        await self._send(interaction, build_monthly_ranking_report(ranking))

    @app_commands.command(name="yearrank", description="Show this year's ranking.")
    async def year_rank(self, interaction: discord.Interaction) -> None:
        ranking = await run_blocking(self.bot.ledger.yearly_ranking)
        await self._send(interaction, build_yearly_ranking_report(ranking))

    @app_commands.command(name="wakeorder", description="Show today's wake-up order.")
    async def wake_order(self, interaction: discord.Interaction) -> None:
        summary = await run_blocking(self.bot.wake.build_order_summary)
        await self._send(interaction, build_wake_order_report(summary))

    @app_commands.command(name="payouts", description="Show how the pot would be split right now.")
    async def payouts(self, interaction: discord.Interaction) -> None:
        await self._send(interaction, await run_blocking(self._payouts))

    @app_commands.command(name="monthend", description="Preview the month-end summary.")
    async def month_end(self, interaction: discord.Interaction) -> None:
        await self._send(interaction, await run_blocking(self._month_end_preview))


async def setup(bot: StreakboardBot) -> None:
    await bot.add_cog(Reports(bot))
