"""
streakboard.bot.core — Bot Instance & Cog Loader
=================================================

Defines :class:`StreakboardBot`, a ``commands.Bot`` subclass that:

1. Carries the shared config, ledger, wake tracker and (optional) DB
   engine, so every Cog reaches them via ``self.bot.*``.
2. Builds the check-in and admin services on top of the core.
3. Loads every Cog in ``streakboard/bot/cogs/``.
4. Syncs the slash-command tree on startup (guild-scoped when
   ``DEV_GUILD_ID`` is set, global otherwise).
5. Writes a final state snapshot on shutdown when persistence is on.
"""

from __future__ import annotations

import logging
import os

import discord
from discord.abc import Messageable
from discord.ext import commands
from sqlalchemy import Engine

from streakboard.bridge import run_blocking
from streakboard.config import StreakboardConfig
from streakboard.engine.ledger import Ledger
from streakboard.engine.wake import WakeOrderTracker
from streakboard.services.admin_service import AdminService
from streakboard.services.checkin_service import CheckinService
from streakboard.services.snapshot_service import save_snapshot

logger = logging.getLogger(__name__)

# Cog modules to load on startup.
EXTENSIONS: list[str] = [
    "streakboard.bot.cogs.checkins",
    "streakboard.bot.cogs.reports",
    "streakboard.bot.cogs.admin",
    "streakboard.bot.cogs.tasks",
]

# Discord's hard limit on message length
MESSAGE_LIMIT = 2000


def split_message(text: str, limit: int = MESSAGE_LIMIT) -> list[str]:
    """Split *text* on line boundaries into chunks of at most *limit* chars."""
    chunks: list[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


async def send_text(channel: Messageable, text: str) -> None:
    """Send *text*, split into as many messages as Discord requires."""
    for chunk in split_message(text):
        await channel.send(chunk)


class StreakboardBot(commands.Bot):
    """Custom Bot subclass that carries the scoring core.

    Parameters
    ----------
    cfg:
        The parsed :class:`StreakboardConfig` from ``config.yaml``.
    ledger, wake:
        The in-memory scoring core (shared lock).
    engine:
        Optional SQLAlchemy engine used for snapshots.
    """

    def __init__(
        self,
        cfg: StreakboardConfig,
        ledger: Ledger,
        wake: WakeOrderTracker,
        engine: Engine | None = None,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True    # Privileged: "!gym" / "!awake" parsing
        intents.members = True            # Privileged: display names
        intents.presences = False

        super().__init__(
            command_prefix=cfg.bot_prefix,
            intents=intents,
            description=f"{cfg.community_name} — gym & wake-up streaks",
        )

        self.cfg = cfg
        self.ledger = ledger
        self.wake = wake
        self.engine = engine

        self.checkins = CheckinService(ledger, wake, cfg)
        self.admin = AdminService(ledger, wake, cfg.owner_id)

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load all Cog extensions; one broken Cog doesn't stop the rest."""
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)

        dev_guild_id = os.getenv("DEV_GUILD_ID")
        if dev_guild_id:
            guild = discord.Object(id=int(dev_guild_id))
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.info("Synced %d commands to dev guild %s", len(synced), dev_guild_id)
        else:
            synced = await self.tree.sync()
            logger.info("Synced %d commands globally", len(synced))

    async def close(self) -> None:
        """Graceful shutdown — persist a last snapshot first."""
        logger.info("Bot shutting down…")
        await self.save_state()
        await super().close()

    # -----------------------------------------------------------------------
    # Helpers shared by cogs
    # -----------------------------------------------------------------------
    async def save_state(self) -> None:
        """Snapshot the core to the DB (no-op without persistence)."""
        if self.engine is None:
            return
        try:
            saved = await run_blocking(save_snapshot, self.engine, self.ledger, self.wake)
            logger.debug("Saved snapshot of %d records", saved)
        except Exception:
            logger.exception("Snapshot write failed", extra={"task": "snapshot"})

    def find_text_channel(self, name: str) -> discord.TextChannel | None:
        """Look up a text channel in the primary guild by name (case-insensitive)."""
        guild = self.get_guild(self.cfg.guild_id)
        if guild is None:
            logger.warning("Primary guild %d not found", self.cfg.guild_id)
            return None
        wanted = name.lower()
        for ch in guild.text_channels:
            if ch.name.lower() == wanted:
                return ch
        return None
