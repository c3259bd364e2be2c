"""
streakboard.engine.anti_cheat — Stale-photo detection
======================================================

A gym check-in must come with a photo.  When the photo carries a capture
date older than the allowed window, the check-in is treated as a cheat:
no award, a fixed point penalty instead.

A missing capture date is "no signal" and never counts as a cheat.
"""

from __future__ import annotations

from datetime import date, timedelta

__all__ = ["DEFAULT_CHEAT_PENALTY", "DEFAULT_STALE_DAYS", "is_stale_capture"]

DEFAULT_CHEAT_PENALTY = 5
DEFAULT_STALE_DAYS = 1


def is_stale_capture(
    capture_date: date | None, today: date, max_age_days: int = DEFAULT_STALE_DAYS
) -> bool:
    """True when *capture_date* lies more than *max_age_days* before *today*."""
    if capture_date is None:
        return False
    return capture_date < today - timedelta(days=max_age_days)
