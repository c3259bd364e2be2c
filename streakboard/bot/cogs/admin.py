"""
streakboard.bot.cogs.admin — Admin Slash Commands
==================================================

Discord slash commands for the owner:
- /setpoints — overwrite a member's month points
- /setstreak — overwrite a member's gym streak
- /setstake — per-player stake in euros (e.g. 10.5)
- /setplayer — number of players paying into the pot
- /setwakeplayers — expected wake-up participants (mentions)

And one command open to everyone:
- /designate — publicly call a member a servant

Owner-only commands are gated by :func:`is_owner`; the admin service
checks again, so the rule holds for any caller of the service.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from streakboard.bridge import run_blocking
from streakboard.services.admin_service import DENIED_MESSAGE, CommandReply

if TYPE_CHECKING:
    from streakboard.bot.core import StreakboardBot

logger = logging.getLogger(__name__)


def is_owner():
    """Decorator that checks the invoker against the configured owner id."""
    async def predicate(interaction: discord.Interaction) -> bool:
        bot: StreakboardBot = interaction.client  # type: ignore[assignment]
        return bot.admin.is_owner(str(interaction.user.id))
    return app_commands.check(predicate)


async def _reply(interaction: discord.Interaction, reply: CommandReply) -> None:
    await interaction.response.send_message(reply.message, ephemeral=reply.ephemeral)


class Admin(commands.Cog, name="Admin"):
    """Ledger administration for the owner."""

    def __init__(self, bot: StreakboardBot) -> None:
        self.bot = bot

    # -------------------------------------------------------------------
    # /setpoints
    # -------------------------------------------------------------------
    @app_commands.command(name="setpoints", description="Set a member's points for this month.")
    @app_commands.describe(member="Member whose points are set", points="New point total")
    @is_owner()
    async def set_points(
        self, interaction: discord.Interaction, member: discord.Member, points: int
    ) -> None:
        reply = await run_blocking(
            self.bot.admin.set_points,
            str(interaction.user.id),
            str(member.id),
            member.display_name,
            points,
        )
        await _reply(interaction, reply)

    # -------------------------------------------------------------------
    # /setstreak
    # -------------------------------------------------------------------
    @app_commands.command(name="setstreak", description="Set a member's gym streak.")
    @app_commands.describe(member="Member whose streak is set", streak="New streak value")
    @is_owner()
    async def set_streak(
        self, interaction: discord.Interaction, member: discord.Member, streak: int
    ) -> None:
        reply = await run_blocking(
            self.bot.admin.set_streak,
            str(interaction.user.id),
            str(member.id),
            member.display_name,
            streak,
        )
        await _reply(interaction, reply)

    # -------------------------------------------------------------------
    # /setstake
    # -------------------------------------------------------------------
    @app_commands.command(name="setstake", description="Set the stake per player (euros, e.g. 10.5).")
    @app_commands.describe(euro="Stake per player in euros, at most two decimals")
    @is_owner()
    async def set_stake(self, interaction: discord.Interaction, euro: float) -> None:
        reply = await run_blocking(
            self.bot.admin.set_stake, str(interaction.user.id), euro
        )
        await _reply(interaction, reply)

    # -------------------------------------------------------------------
    # /setplayer
    # -------------------------------------------------------------------
    @app_commands.command(name="setplayer", description="Set the number of players in the stake pot.")
    @app_commands.describe(count="Number of players")
    @is_owner()
    async def set_player(self, interaction: discord.Interaction, count: int) -> None:
        reply = await run_blocking(
            self.bot.admin.set_player_count, str(interaction.user.id), count
        )
        await _reply(interaction, reply)

    # -------------------------------------------------------------------
    # /setwakeplayers
    # -------------------------------------------------------------------
    @app_commands.command(name="setwakeplayers", description="Set the wake-up players (mentions).")
    @app_commands.describe(players="User mentions separated by spaces")
    @is_owner()
    async def set_wake_players(self, interaction: discord.Interaction, players: str) -> None:
        reply = await run_blocking(
            self.bot.admin.set_wake_roster, str(interaction.user.id), players
        )
        await _reply(interaction, reply)

    # -------------------------------------------------------------------
    # /designate
    # -------------------------------------------------------------------
    @app_commands.command(name="designate", description="Call a member a servant.")
    @app_commands.describe(member="Target member")
    async def designate(self, interaction: discord.Interaction, member: discord.Member) -> None:
        reply = self.bot.admin.designate(str(interaction.user.id), str(member.id))
        await _reply(interaction, reply)

    # -------------------------------------------------------------------
    # Error handler for non-owner use
    # -------------------------------------------------------------------
    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        if isinstance(error, app_commands.CheckFailure):
            logger.warning(
                "Denied /%s for %s",
                interaction.command.name if interaction.command else "?",
                interaction.user.id,
            )
            await interaction.response.send_message(DENIED_MESSAGE, ephemeral=True)
        else:
            raise error


async def setup(bot: StreakboardBot) -> None:
    await bot.add_cog(Admin(bot))
