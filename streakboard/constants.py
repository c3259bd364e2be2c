"""
streakboard.constants — Shared Constants & Helpers
===================================================

Presentation constants, money formatting and mention parsing.  Import
from here instead of duplicating in cogs and services.
"""

from __future__ import annotations

import re

RANK_BADGES: list[str] = ["\U0001f947", "\U0001f948", "\U0001f949"]  # 🥇🥈🥉

# Posted in the wake channel on the first day of every month
FIRST_OF_MONTH_LYRICS = (
    "Wake up (Wake up)\n"
    "It's the first of the month (slatt, slatt)\n"
    "I brush my teeth and count up (What? Slatt, slatt, slatt, slatt, woah)"
)

GYM_COMMAND = "!gym"
AWAKE_COMMAND = "!awake"
RANK_COMMAND = "!rank"
YEAR_RANK_COMMAND = "!yearrank"
WAKE_ORDER_COMMAND = "!wakeorder"


# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------
def format_cents(cents: int, currency: str = "€") -> str:
    """Render minor units as ``12,34 €`` (comma decimal separator)."""
    sign = "-" if cents < 0 else ""
    major, minor = divmod(abs(cents), 100)
    return f"{sign}{major},{minor:02d} {currency}"


# ---------------------------------------------------------------------------
# Mentions
# ---------------------------------------------------------------------------
_MENTION_REGEX = re.compile(r"<@!?([0-9]+)>")


def parse_mentions(text: str) -> list[str]:
    """Extract user ids from ``<@123>`` / ``<@!123>`` mentions, in order."""
    return _MENTION_REGEX.findall(text)


def mention(user_id: str) -> str:
    return f"<@{user_id}>"
