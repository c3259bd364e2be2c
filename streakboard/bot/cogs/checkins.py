"""
streakboard.bot.cogs.checkins — Gym & Wake-up Check-ins
========================================================

Listens for on_message events, normalizes them into CheckinEvents and
hands them to the check-in service.

Pipeline:
1. on_message fires → gate checks (bot, DM)
2. Build a CheckinEvent and classify it (gym / awake / report / ignored)
3. For gym check-ins with a photo: download it and read the EXIF capture
   date on a worker thread (outside the ledger lock)
4. Run the check-in service via run_blocking and post its replies
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from streakboard.bot.core import send_text
from streakboard.bridge import run_blocking
from streakboard.services.checkin_service import CheckinEvent, CheckinKind
from streakboard.services.image_metadata import extract_capture_date

if TYPE_CHECKING:
    from streakboard.bot.core import StreakboardBot

logger = logging.getLogger(__name__)


def first_image(message: discord.Message) -> discord.Attachment | None:
    """The first attachment Discord reports as an image, if any."""
    for att in message.attachments:
        if att.content_type and att.content_type.startswith("image/"):
            return att
    return None


class Checkins(commands.Cog, name="Checkins"):
    """Awards gym points and records the wake-up order."""

    def __init__(self, bot: StreakboardBot) -> None:
        self.bot = bot

    def _build_event(self, message: discord.Message) -> CheckinEvent:
        return CheckinEvent(
            user_id=str(message.author.id),
            display_name=message.author.display_name,
            channel_name=getattr(message.channel, "name", "") or "",
            message_text=message.content,
            has_image_attachment=first_image(message) is not None,
            timestamp=datetime.now(self.bot.cfg.tz),
        )

    async def _capture_date(self, attachment: discord.Attachment) -> date | None:
        """Download *attachment* and read its capture date (None on any failure)."""
        try:
            data = await attachment.read()
        except discord.HTTPException as exc:
            logger.warning("Could not download attachment %s: %s", attachment.id, exc)
            return None
        return await run_blocking(extract_capture_date, data)

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        try:
            await self._handle_message(message)
        except Exception:
            logger.exception(
                "Error processing message %s from user %s",
                message.id,
                message.author.id,
                extra={"user_id": message.author.id, "message_id": message.id},
            )

    async def _handle_message(self, message: discord.Message) -> None:
        """Inner message handler (separated for error isolation)."""

        # Gate 1: Ignore bots
        if message.author.bot:
            return

        # Gate 2: Ignore DMs
        if message.guild is None:
            return

        event = self._build_event(message)
        kind = self.bot.checkins.classify(event)
        if kind is CheckinKind.IGNORED:
            return

        if kind is CheckinKind.GYM:
            image = first_image(message)
            if image is not None:
                event = replace(event, image_capture_date=await self._capture_date(image))

        outcome = await run_blocking(self.bot.checkins.handle, event)
        logger.debug(
            "Check-in %s from %s → %d replies",
            kind, event.display_name, len(outcome.replies),
        )
        for reply in outcome.replies:
            await send_text(message.channel, reply)


async def setup(bot: StreakboardBot) -> None:
    await bot.add_cog(Checkins(bot))
