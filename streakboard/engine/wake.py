"""
streakboard.engine.wake — Same-day wake-up order
=================================================

First-come-first-served registration for the early-birds channel.  The
tracker keeps one registration window per calendar day; the first
arrival of a day extends that user's wake-first streak on the shared
:class:`Ledger` record.

All state is guarded by the ledger's lock.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, time

from streakboard.engine.ledger import Ledger
from streakboard.engine.records import WakeArrivalResult

logger = logging.getLogger(__name__)

__all__ = ["WakeArrival", "WakeOrderSummary", "WakeOrderTracker", "WakeSnapshot"]


@dataclass(frozen=True, slots=True)
class WakeArrival:
    position: int
    user_id: str
    display_name: str
    time: time


@dataclass(frozen=True, slots=True)
class WakeOrderSummary:
    """Today's arrivals (earliest first) and the wake-first holder's streaks."""

    date: date
    arrivals: tuple[WakeArrival, ...]
    first_current_streak: int
    first_best_streak: int

    @property
    def first(self) -> WakeArrival:
        return self.arrivals[0]


@dataclass(slots=True)
class WakeSnapshot:
    roster: list[str]
    wake_date: date | None
    arrivals: list[tuple[str, time]]
    names: dict[str, str] = field(default_factory=dict)


class WakeOrderTracker:
    """Registers wake-up check-ins and reports the day's order."""

    def __init__(self, ledger: Ledger) -> None:
        self.ledger = ledger
        self._roster: list[str] = []
        self._wake_date: date | None = None
        # user_id → arrival time; dict insertion order is the check-in order
        self._arrivals: dict[str, time] = {}
        # Names of today's arrivals; only the first arrival gets a ledger record
        self._names: dict[str, str] = {}

    # -------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------
    def set_roster(self, user_ids: Iterable[str]) -> int:
        """Replace the expected participant list.  Returns its size."""
        with self.ledger.lock:
            self._roster = list(dict.fromkeys(user_ids))
            return len(self._roster)

    def roster(self) -> list[str]:
        with self.ledger.lock:
            return list(self._roster)

    def sleepers(self, except_user_id: str) -> list[str]:
        """Roster members other than *except_user_id*, in roster order."""
        with self.ledger.lock:
            return [uid for uid in self._roster if uid != except_user_id]

    def expected_players(self) -> int:
        """Roster size, falling back to the ledger's player count."""
        with self.ledger.lock:
            return len(self._roster) or self.ledger.player_count

    # -------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------
    def register_arrival(
        self, user_id: str, display_name: str, today: date, now: time
    ) -> WakeArrivalResult:
        with self.ledger.lock:
            self.ledger.rollover_if_needed(today)

            if self._wake_date != today:
                self._arrivals.clear()
                self._names.clear()
                self._wake_date = today

            if user_id in self._arrivals:
                position = list(self._arrivals).index(user_id) + 1
                return WakeArrivalResult(
                    accepted=False,
                    is_first=False,
                    is_last=False,
                    position=position,
                    date=today,
                    time=self._arrivals[user_id],
                )

            self._arrivals[user_id] = now
            self._names[user_id] = display_name
            position = len(self._arrivals)
            is_first = position == 1
            is_last = bool(self._roster) and position >= min(
                self.ledger.player_count, len(self._roster)
            )

            if is_first:
                rec = self.ledger.touch(user_id, display_name)
                rec.record_wake_first(today)
                logger.info(
                    "%s is first awake on %s (streak %d)",
                    display_name, today, rec.wake_first_current_streak,
                )

            return WakeArrivalResult(
                accepted=True,
                is_first=is_first,
                is_last=is_last,
                position=position,
                date=today,
                time=now,
            )

    # -------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------
    def build_order_summary(self) -> WakeOrderSummary | None:
        """Today's order sorted by arrival time, or None when nobody registered."""
        with self.ledger.lock:
            if self._wake_date is None or not self._arrivals:
                return None

            ordered = sorted(self._arrivals.items(), key=lambda item: item[1])
            arrivals = tuple(
                WakeArrival(
                    position=i,
                    user_id=uid,
                    display_name=self._names.get(uid) or self.ledger.display_name_of(uid),
                    time=t,
                )
                for i, (uid, t) in enumerate(ordered, start=1)
            )
            first = self.ledger.get_record(arrivals[0].user_id)
            return WakeOrderSummary(
                date=self._wake_date,
                arrivals=arrivals,
                first_current_streak=first.wake_first_current_streak if first else 0,
                first_best_streak=first.wake_first_best_streak if first else 0,
            )

    # -------------------------------------------------------------------
    # Snapshot / restore
    # -------------------------------------------------------------------
    def snapshot(self) -> WakeSnapshot:
        with self.ledger.lock:
            return WakeSnapshot(
                roster=list(self._roster),
                wake_date=self._wake_date,
                arrivals=list(self._arrivals.items()),
                names=dict(self._names),
            )

    def restore(self, snap: WakeSnapshot) -> None:
        with self.ledger.lock:
            self._roster = list(snap.roster)
            self._wake_date = snap.wake_date
            self._arrivals = dict(snap.arrivals)
            self._names = dict(snap.names)
