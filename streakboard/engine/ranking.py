"""
streakboard.engine.ranking — Monthly and yearly leaderboards
=============================================================

Pure derivations over a collection of :class:`UserRecord`.  The ledger
calls these while holding its lock and hands out the frozen result, so
callers can render it without touching live records.

Ordering (both periods)::

    points desc → best_streak desc → display_name asc (case-sensitive)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from streakboard.engine.records import UserRecord

__all__ = ["Ranking", "RankingEntry", "rank_monthly", "rank_yearly"]


@dataclass(frozen=True, slots=True)
class RankingEntry:
    """Immutable copy of the record fields a leaderboard line needs."""

    user_id: str
    display_name: str
    points: int
    current_streak: int
    best_streak: int
    best_monthly_points: int
    best_yearly_points: int


@dataclass(frozen=True, slots=True)
class Ranking:
    """An ordered leaderboard, best first.  May be empty."""

    period: str
    entries: tuple[RankingEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def winner(self) -> RankingEntry | None:
        return self.entries[0] if self.entries else None

    @property
    def last(self) -> RankingEntry | None:
        return self.entries[-1] if self.entries else None


def _rank(
    records: Iterable[UserRecord],
    period: str,
    points_of: Callable[[UserRecord], int],
) -> Ranking:
    ordered = sorted(
        records,
        key=lambda r: (-points_of(r), -r.best_streak, r.display_name),
    )
    return Ranking(
        period=period,
        entries=tuple(
            RankingEntry(
                user_id=r.user_id,
                display_name=r.display_name,
                points=points_of(r),
                current_streak=r.current_streak,
                best_streak=r.best_streak,
                best_monthly_points=r.best_monthly_points,
                best_yearly_points=r.best_yearly_points,
            )
            for r in ordered
        ),
    )


def rank_monthly(records: Iterable[UserRecord], period: str) -> Ranking:
    """Leaderboard keyed on ``month_points``."""
    return _rank(records, period, lambda r: r.month_points)


def rank_yearly(records: Iterable[UserRecord], period: str) -> Ranking:
    """Leaderboard keyed on ``year_points``."""
    return _rank(records, period, lambda r: r.year_points)
