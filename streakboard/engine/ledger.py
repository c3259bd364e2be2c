"""
streakboard.engine.ledger — Points, streaks and period rollover
================================================================

The :class:`Ledger` is the single owner of every :class:`UserRecord` and
of the period markers (current month / year) plus the stake settings used
for payouts.

Concurrency: every public method runs under ``Ledger.lock`` (an RLock).
The :class:`~streakboard.engine.wake.WakeOrderTracker` shares the same
lock, so an award, a rollover, an arrival and a ranking read never
interleave.  Nothing in here performs I/O.

Rollover runs lazily: the first check-in dated in a new month finalizes
the old month (and the old year when it changed) before it is applied.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from streakboard.engine.payout import PayoutPlan, compute_payouts
from streakboard.engine.ranking import Ranking, rank_monthly, rank_yearly
from streakboard.engine.records import AwardResult, UserRecord, next_streak

logger = logging.getLogger(__name__)

__all__ = [
    "ClosedPeriod",
    "DEFAULT_POINTS_PER_AWARD",
    "Ledger",
    "LedgerSnapshot",
    "Month",
]

DEFAULT_POINTS_PER_AWARD = 10


@dataclass(frozen=True, slots=True, order=True)
class Month:
    """A calendar month (year + month)."""

    year: int
    month: int

    @classmethod
    def from_date(cls, day: date) -> Month:
        return cls(day.year, day.month)

    @classmethod
    def parse(cls, raw: str) -> Month:
        """Parse ``YYYY-MM``."""
        year, month = raw.split("-", 1)
        return cls(int(year), int(month))

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def label(self) -> str:
        """Human label, e.g. ``Oct 2026``."""
        return self.first_day.strftime("%b %Y")

    def previous(self) -> Month:
        if self.month == 1:
            return Month(self.year - 1, 12)
        return Month(self.year, self.month - 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True, slots=True)
class ClosedPeriod:
    """Final standings of a month that was just rolled over.

    ``yearly`` / ``year`` are only set when the rollover also crossed a
    year boundary.
    """

    month: Month
    monthly: Ranking
    payouts: PayoutPlan | None
    year: int | None = None
    yearly: Ranking | None = None

    @property
    def closed_year(self) -> bool:
        return self.year is not None


@dataclass(slots=True)
class LedgerSnapshot:
    """Detached copy of the full ledger state (for persistence)."""

    current_month: Month
    current_year: int
    stake_per_player_cents: int
    player_count: int
    records: list[UserRecord] = field(default_factory=list)
    last_closed: ClosedPeriod | None = None


class Ledger:
    """Thread-safe in-memory ledger of per-user points and streaks.

    Usage::

        ledger = Ledger(points_per_award=10)
        res = ledger.award_daily_points("42", "drew", date.today())
        ranking = ledger.monthly_ranking()
    """

    def __init__(
        self,
        points_per_award: int = DEFAULT_POINTS_PER_AWARD,
        *,
        today: date | None = None,
    ) -> None:
        self.lock = threading.RLock()
        self.points_per_award = points_per_award

        start = today or date.today()
        self._records: dict[str, UserRecord] = {}
        self._current_month = Month.from_date(start)
        self._current_year = start.year

        self._stake_per_player_cents = 0
        self._player_count = 0
        self._last_closed: ClosedPeriod | None = None

    # -------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------
    @property
    def current_month(self) -> Month:
        with self.lock:
            return self._current_month

    @property
    def current_year(self) -> int:
        with self.lock:
            return self._current_year

    @property
    def player_count(self) -> int:
        with self.lock:
            return self._player_count

    @property
    def stake_per_player_cents(self) -> int:
        with self.lock:
            return self._stake_per_player_cents

    @property
    def last_closed(self) -> ClosedPeriod | None:
        """Standings of the most recently closed month, if any."""
        with self.lock:
            return self._last_closed

    def get_record(self, user_id: str) -> UserRecord | None:
        """Return a detached copy of *user_id*'s record, or None."""
        with self.lock:
            rec = self._records.get(user_id)
            return replace(rec) if rec is not None else None

    def __len__(self) -> int:
        with self.lock:
            return len(self._records)

    # -------------------------------------------------------------------
    # Record access (callers must hold ``lock``)
    # -------------------------------------------------------------------
    def touch(self, user_id: str, display_name: str) -> UserRecord:
        """Fetch or create the live record and refresh its display name."""
        with self.lock:
            rec = self._records.get(user_id)
            if rec is None:
                rec = UserRecord(user_id=user_id, display_name=display_name)
                self._records[user_id] = rec
                logger.debug("Created record for %s (%s)", display_name, user_id)
            else:
                rec.display_name = display_name
            return rec

    def display_name_of(self, user_id: str) -> str:
        with self.lock:
            rec = self._records.get(user_id)
            return rec.display_name if rec is not None else user_id

    # -------------------------------------------------------------------
    # Awards & manual adjustments
    # -------------------------------------------------------------------
    def award_daily_points(
        self, user_id: str, display_name: str, today: date
    ) -> AwardResult:
        """Grant the daily check-in points for *today* (once per day)."""
        with self.lock:
            self.rollover_if_needed(today)
            rec = self.touch(user_id, display_name)

            if rec.last_award_date == today:
                return AwardResult(
                    accepted=False,
                    points_added=0,
                    total_points=rec.month_points,
                    current_streak=rec.current_streak,
                    best_streak=rec.best_streak,
                )

            rec.current_streak = next_streak(
                rec.last_award_date, today, rec.current_streak
            )
            rec.best_streak = max(rec.best_streak, rec.current_streak)
            points = self.points_per_award
            rec.month_points += points
            if points > 0:
                rec.year_points += points
            rec.last_award_date = today

            return AwardResult(
                accepted=True,
                points_added=points,
                total_points=rec.month_points,
                current_streak=rec.current_streak,
                best_streak=rec.best_streak,
            )

    def adjust_points(self, user_id: str, display_name: str, delta: int) -> int:
        """Add *delta* (may be negative) to the month total.  No streak changes."""
        with self.lock:
            rec = self.touch(user_id, display_name)
            rec.month_points += delta
            return rec.month_points

    def set_points(self, user_id: str, display_name: str, value: int) -> int:
        with self.lock:
            rec = self.touch(user_id, display_name)
            return self.adjust_points(user_id, display_name, value - rec.month_points)

    def set_streak(self, user_id: str, display_name: str, value: int) -> int:
        """Overwrite the current gym streak; negative values clamp to 0."""
        with self.lock:
            rec = self.touch(user_id, display_name)
            rec.current_streak = max(0, value)
            rec.best_streak = max(rec.best_streak, rec.current_streak)
            return rec.current_streak

    # -------------------------------------------------------------------
    # Stake configuration
    # -------------------------------------------------------------------
    def set_stake(self, amount: Decimal) -> int:
        """Set the per-player stake from major units; returns the stored cents.

        Raises
        ------
        ValueError
            If *amount* is negative.
        """
        if amount < 0:
            raise ValueError("stake must not be negative")
        cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        with self.lock:
            self._stake_per_player_cents = cents
        logger.info("Stake per player set to %d cents", cents)
        return cents

    def set_player_count(self, count: int) -> int:
        with self.lock:
            self._player_count = max(0, count)
            return self._player_count

    # -------------------------------------------------------------------
    # Period rollover
    # -------------------------------------------------------------------
    def rollover_if_needed(self, today: date) -> ClosedPeriod | None:
        """Roll over when *today* lies in a different month than the ledger."""
        with self.lock:
            target = Month.from_date(today)
            if target == self._current_month:
                return None
            return self.rollover_to_period(target)

    def rollover_to_period(self, new_month: Month) -> ClosedPeriod:
        """Finalize the current month (and year, if it changes) and reset.

        Highscores are folded in before the counters are cleared; wake-first
        streaks are left untouched.
        """
        with self.lock:
            old_month = self._current_month
            monthly = self._monthly_ranking_locked()
            payouts = compute_payouts(
                monthly, self._player_count, self._stake_per_player_cents
            )
            closed_year: int | None = None
            yearly: Ranking | None = None

            for rec in self._records.values():
                rec.finalize_month()

            if new_month.year != old_month.year:
                closed_year = self._current_year
                yearly = self._yearly_ranking_locked()
                for rec in self._records.values():
                    rec.finalize_year()
                self._current_year = new_month.year

            self._current_month = new_month
            for rec in self._records.values():
                rec.reset_for_new_month()

            self._last_closed = ClosedPeriod(
                month=old_month,
                monthly=monthly,
                payouts=payouts,
                year=closed_year,
                yearly=yearly,
            )
            logger.info(
                "Rolled over %s → %s (%d records%s)",
                old_month, new_month, len(self._records),
                f", closed year {closed_year}" if closed_year is not None else "",
            )
            return self._last_closed

    # -------------------------------------------------------------------
    # Rankings & payouts
    # -------------------------------------------------------------------
    def _monthly_ranking_locked(self) -> Ranking:
        return rank_monthly(self._records.values(), self._current_month.label)

    def _yearly_ranking_locked(self) -> Ranking:
        return rank_yearly(self._records.values(), str(self._current_year))

    def monthly_ranking(self) -> Ranking:
        with self.lock:
            return self._monthly_ranking_locked()

    def yearly_ranking(self) -> Ranking:
        with self.lock:
            return self._yearly_ranking_locked()

    def payout_plan(self, ranking: Ranking | None = None) -> PayoutPlan | None:
        """Payouts over *ranking* (defaults to the live monthly ranking)."""
        with self.lock:
            if ranking is None:
                ranking = self._monthly_ranking_locked()
            return compute_payouts(
                ranking, self._player_count, self._stake_per_player_cents
            )

    # -------------------------------------------------------------------
    # Snapshot / restore
    # -------------------------------------------------------------------
    def snapshot(self) -> LedgerSnapshot:
        with self.lock:
            return LedgerSnapshot(
                current_month=self._current_month,
                current_year=self._current_year,
                stake_per_player_cents=self._stake_per_player_cents,
                player_count=self._player_count,
                records=[replace(r) for r in self._records.values()],
                last_closed=self._last_closed,
            )

    def restore(self, snap: LedgerSnapshot) -> None:
        """Replace the whole state with *snap*."""
        with self.lock:
            self._current_month = snap.current_month
            self._current_year = snap.current_year
            self._stake_per_player_cents = snap.stake_per_player_cents
            self._player_count = max(0, snap.player_count)
            self._records = {r.user_id: replace(r) for r in snap.records}
            self._last_closed = snap.last_closed
        logger.info(
            "Ledger restored: %d records, month %s", len(snap.records), snap.current_month
        )
