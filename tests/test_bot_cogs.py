"""
tests/test_bot_cogs.py — Discord Glue Tests
============================================

Exercises the cog logic with mocked Discord objects (no gateway
connection): message gating, attachment handling, message splitting and
the month-close helper used by the daily task.
"""

from __future__ import annotations

import asyncio
import io
from datetime import date, datetime, timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from streakboard.bot.cogs.checkins import Checkins, first_image
from streakboard.bot.cogs.tasks import close_previous_month
from streakboard.bot.core import split_message
from streakboard.engine.ledger import Ledger, Month
from streakboard.engine.wake import WakeOrderTracker
from streakboard.services.checkin_service import CheckinService


# Helper to run async tests without pytest-asyncio
def run_async(coro):
    """Run an async coroutine in a new event loop."""
    return asyncio.get_event_loop_policy().new_event_loop().run_until_complete(coro)


def _attachment(content_type="image/jpeg", data=b"not really a jpeg"):
    att = MagicMock()
    att.content_type = content_type
    att.read = AsyncMock(return_value=data)
    return att


def _message(text, channel_name, *, attachments=(), bot=False, guild=True):
    msg = MagicMock()
    msg.content = text
    msg.author.id = 1
    msg.author.bot = bot
    msg.author.display_name = "Alice"
    msg.guild = MagicMock() if guild else None
    msg.channel.name = channel_name
    msg.channel.send = AsyncMock()
    msg.attachments = list(attachments)
    return msg


def _photo_taken(day: date) -> bytes:
    exif = Image.Exif()
    exif.get_ifd(0x8769)[0x9003] = day.strftime("%Y:%m:%d 12:00:00")  # DateTimeOriginal
    buf = io.BytesIO()
    Image.new("RGB", (4, 4)).save(buf, format="JPEG", exif=exif)
    return buf.getvalue()


@pytest.fixture
def live(cfg):
    """Ledger, wake tracker and mocked bot positioned at the bot's local today."""
    today = datetime.now(cfg.tz).date()
    ledger = Ledger(cfg.points_per_gym, today=today)
    wake = WakeOrderTracker(ledger)
    bot = MagicMock()
    bot.cfg = cfg
    bot.checkins = CheckinService(ledger, wake, cfg)
    return SimpleNamespace(today=today, ledger=ledger, wake=wake, bot=bot)


class TestFirstImage:
    def test_picks_first_image(self):
        doc = _attachment("application/pdf")
        img = _attachment("image/png")
        assert first_image(_message("!gym", "x", attachments=[doc, img])) is img

    def test_missing_content_type(self):
        assert first_image(_message("!gym", "x", attachments=[_attachment(None)])) is None


class TestCheckinsCog:
    def test_gym_checkin_awards_points(self, live, cfg):
        cog = Checkins(live.bot)
        msg = _message("!gym", cfg.gym_channel_name, attachments=[_attachment()])

        run_async(cog._handle_message(msg))

        msg.channel.send.assert_awaited_once()
        assert "is pumping!" in msg.channel.send.await_args.args[0]
        assert live.ledger.get_record("1").month_points == cfg.points_per_gym

    def test_stale_photo_is_penalized(self, live, cfg):
        cog = Checkins(live.bot)
        photo = _photo_taken(live.today - timedelta(days=3))
        msg = _message("!gym", cfg.gym_channel_name, attachments=[_attachment(data=photo)])

        run_async(cog._handle_message(msg))

        assert "used an old photo" in msg.channel.send.await_args.args[0]
        assert live.ledger.get_record("1").month_points == -cfg.cheat_penalty

    def test_ignores_bots(self, live, cfg):
        cog = Checkins(live.bot)
        msg = _message("!gym", cfg.gym_channel_name, attachments=[_attachment()], bot=True)
        run_async(cog._handle_message(msg))
        msg.channel.send.assert_not_awaited()
        assert len(live.ledger) == 0

    def test_ignores_dms(self, live, cfg):
        cog = Checkins(live.bot)
        msg = _message("!gym", cfg.gym_channel_name, attachments=[_attachment()], guild=False)
        run_async(cog._handle_message(msg))
        msg.channel.send.assert_not_awaited()

    def test_ignores_plain_chat(self, live, cfg):
        cog = Checkins(live.bot)
        msg = _message("what a workout", cfg.gym_channel_name)
        run_async(cog._handle_message(msg))
        msg.channel.send.assert_not_awaited()

    def test_awake_posts_every_reply(self, live, cfg):
        live.wake.set_roster(["1", "2"])
        cog = Checkins(live.bot)
        msg = _message("!awake", cfg.wake_channel_name, attachments=[_attachment()])

        run_async(cog._handle_message(msg))

        assert msg.channel.send.await_count == 2
        assert live.wake.build_order_summary().first.user_id == "1"


class TestSplitMessage:
    def test_short_text_unchanged(self):
        assert split_message("hello\nworld") == ["hello\nworld"]

    def test_splits_on_lines(self):
        chunks = split_message("aaaa\nbbbb\ncccc", limit=9)
        assert chunks == ["aaaa\nbbbb", "cccc"]

    def test_long_line_hard_split(self):
        chunks = split_message("x" * 25, limit=10)
        assert chunks == ["x" * 10, "x" * 10, "x" * 5]
        assert all(len(c) <= 10 for c in chunks)


class TestClosePreviousMonth:
    def test_closes_month_on_first_day(self):
        ledger = Ledger(today=date(2026, 1, 20))
        ledger.set_points("1", "Alice", 30)

        closed = close_previous_month(SimpleNamespace(ledger=ledger), date(2026, 2, 1))

        assert closed.month == Month(2026, 1)
        assert closed.monthly.winner.points == 30
        assert ledger.current_month == Month(2026, 2)

    def test_reuses_close_done_by_checkin(self):
        ledger = Ledger(today=date(2026, 1, 20))
        ledger.set_points("1", "Alice", 30)
        ledger.award_daily_points("2", "Bob", date(2026, 2, 1))

        closed = close_previous_month(SimpleNamespace(ledger=ledger), date(2026, 2, 1))

        assert closed.monthly.winner.display_name == "Alice"

    def test_nothing_closed_yet(self):
        ledger = Ledger(today=date(2026, 2, 1))
        assert close_previous_month(SimpleNamespace(ledger=ledger), date(2026, 2, 1)) is None
