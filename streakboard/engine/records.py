"""
streakboard.engine.records — UserRecord and result envelopes
=============================================================

Plain data carried between the ledger, the wake tracker, the ranking
helpers and the adapters.  No behaviour beyond the streak arithmetic
shared by the gym track and the wake-first track.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time, timedelta

__all__ = [
    "AwardResult",
    "UserRecord",
    "WakeArrivalResult",
    "next_streak",
]


def next_streak(last: date | None, today: date, current: int) -> int:
    """Streak value after an accepted check-in on *today*.

    Consecutive calendar day → ``current + 1``; anything else starts over at 1.
    """
    if last is not None and last + timedelta(days=1) == today:
        return current + 1
    return 1


# ---------------------------------------------------------------------------
# UserRecord — one per distinct user, never deleted
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class UserRecord:
    """Mutable per-user stats owned by the :class:`Ledger`."""

    user_id: str
    display_name: str

    month_points: int = 0
    year_points: int = 0
    current_streak: int = 0
    best_streak: int = 0
    best_monthly_points: int = 0
    best_yearly_points: int = 0
    last_award_date: date | None = None

    # Separate track for "earliest check-in of the day"
    wake_first_current_streak: int = 0
    wake_first_best_streak: int = 0
    last_wake_first_date: date | None = None

    def record_wake_first(self, today: date) -> None:
        """Count *today* towards the wake-first streak (once per day)."""
        if self.last_wake_first_date == today:
            return
        self.wake_first_current_streak = next_streak(
            self.last_wake_first_date, today, self.wake_first_current_streak
        )
        self.wake_first_best_streak = max(
            self.wake_first_best_streak, self.wake_first_current_streak
        )
        self.last_wake_first_date = today

    def finalize_month(self) -> None:
        self.best_monthly_points = max(self.best_monthly_points, self.month_points)

    def finalize_year(self) -> None:
        self.best_yearly_points = max(self.best_yearly_points, self.year_points)
        self.year_points = 0

    def reset_for_new_month(self) -> None:
        self.month_points = 0
        self.current_streak = 0
        self.last_award_date = None


# ---------------------------------------------------------------------------
# Result envelopes
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class AwardResult:
    """Outcome of a daily gym award attempt."""

    accepted: bool
    points_added: int
    total_points: int
    current_streak: int
    best_streak: int


@dataclass(frozen=True, slots=True)
class WakeArrivalResult:
    """Outcome of a wake-up registration.

    ``time`` is the arrival time on record: the new one when accepted,
    the original one when the user was already registered today.
    """

    accepted: bool
    is_first: bool
    is_last: bool
    position: int
    date: date
    time: time
