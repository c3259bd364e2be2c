"""
streakboard.services.snapshot_service — Persist / restore core state
=====================================================================

Copies the in-memory ledger and wake tracker to the snapshot tables and
back.  The in-memory objects stay the source of truth: a snapshot is
taken under the ledger lock (as a detached copy), then written without
holding it.

Called on a timer and on shutdown by the bot, on startup to restore,
and by the read-only API to serve rankings.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import TYPE_CHECKING

from sqlalchemy import delete, select

from streakboard.database.engine import get_session
from streakboard.database.models import LedgerStateRow, UserRecordRow, WakeArrivalRow
from streakboard.engine.ledger import ClosedPeriod, LedgerSnapshot, Month
from streakboard.engine.payout import Payout, PayoutPlan
from streakboard.engine.ranking import Ranking, RankingEntry
from streakboard.engine.records import UserRecord
from streakboard.engine.wake import WakeSnapshot

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from streakboard.engine.ledger import Ledger
    from streakboard.engine.wake import WakeOrderTracker

logger = logging.getLogger(__name__)

_RECORD_FIELDS = (
    "display_name",
    "month_points",
    "year_points",
    "current_streak",
    "best_streak",
    "best_monthly_points",
    "best_yearly_points",
    "last_award_date",
    "wake_first_current_streak",
    "wake_first_best_streak",
    "last_wake_first_date",
)


def _row_to_record(row: UserRecordRow) -> UserRecord:
    return UserRecord(
        user_id=row.user_id,
        **{name: getattr(row, name) for name in _RECORD_FIELDS},
    )


# ---------------------------------------------------------------------------
# Closed month ↔ JSON (ledger_state.last_closed)
# ---------------------------------------------------------------------------
def _ranking_to_json(ranking: Ranking) -> dict:
    return {"period": ranking.period, "entries": [asdict(e) for e in ranking]}


def _ranking_from_json(raw: dict) -> Ranking:
    return Ranking(
        period=raw["period"],
        entries=tuple(RankingEntry(**e) for e in raw["entries"]),
    )


def closed_period_to_json(closed: ClosedPeriod | None) -> dict | None:
    if closed is None:
        return None
    plan = closed.payouts
    return {
        "month": str(closed.month),
        "monthly": _ranking_to_json(closed.monthly),
        "payouts": None if plan is None else {
            "pot_cents": plan.pot_cents,
            "player_count": plan.player_count,
            "stake_per_player_cents": plan.stake_per_player_cents,
            "payouts": [asdict(p) for p in plan.payouts],
        },
        "year": closed.year,
        "yearly": None if closed.yearly is None else _ranking_to_json(closed.yearly),
    }


def closed_period_from_json(raw: dict | None) -> ClosedPeriod | None:
    if not raw:
        return None
    plan = raw.get("payouts")
    return ClosedPeriod(
        month=Month.parse(raw["month"]),
        monthly=_ranking_from_json(raw["monthly"]),
        payouts=None if plan is None else PayoutPlan(
            pot_cents=plan["pot_cents"],
            player_count=plan["player_count"],
            stake_per_player_cents=plan["stake_per_player_cents"],
            payouts=tuple(Payout(**p) for p in plan["payouts"]),
        ),
        year=raw.get("year"),
        yearly=_ranking_from_json(raw["yearly"]) if raw.get("yearly") else None,
    )


# ---------------------------------------------------------------------------
# Snapshot I/O
# ---------------------------------------------------------------------------
def write_snapshot(engine: Engine, ledger_snap: LedgerSnapshot, wake_snap: WakeSnapshot) -> int:
    """Write detached snapshots to the DB.  Returns the number of records saved."""
    with get_session(engine) as session:
        existing = {
            row.user_id: row for row in session.scalars(select(UserRecordRow)).all()
        }
        for rec in ledger_snap.records:
            row = existing.get(rec.user_id)
            if row is None:
                row = UserRecordRow(user_id=rec.user_id)
                session.add(row)
            for name in _RECORD_FIELDS:
                setattr(row, name, getattr(rec, name))

        state = session.get(LedgerStateRow, 1)
        if state is None:
            state = LedgerStateRow(id=1)
            session.add(state)
        state.current_month = str(ledger_snap.current_month)
        state.current_year = ledger_snap.current_year
        state.stake_per_player_cents = ledger_snap.stake_per_player_cents
        state.player_count = ledger_snap.player_count
        state.wake_roster = list(wake_snap.roster)
        state.wake_date = wake_snap.wake_date
        state.last_closed = closed_period_to_json(ledger_snap.last_closed)

        session.execute(delete(WakeArrivalRow))
        for position, (user_id, arrived_at) in enumerate(wake_snap.arrivals, start=1):
            session.add(
                WakeArrivalRow(
                    user_id=user_id,
                    position=position,
                    arrived_at=arrived_at,
                    display_name=wake_snap.names.get(user_id),
                )
            )

    return len(ledger_snap.records)


def save_snapshot(engine: Engine, ledger: Ledger, wake: WakeOrderTracker) -> int:
    """Snapshot *ledger* and *wake* (under the lock) and persist them."""
    with ledger.lock:
        ledger_snap = ledger.snapshot()
        wake_snap = wake.snapshot()
    saved = write_snapshot(engine, ledger_snap, wake_snap)
    logger.debug("Snapshot saved: %d records", saved)
    return saved


def read_snapshot(engine: Engine) -> tuple[LedgerSnapshot, WakeSnapshot] | None:
    """Load the stored snapshot, or None when nothing was saved yet."""
    with get_session(engine) as session:
        state = session.get(LedgerStateRow, 1)
        if state is None:
            return None
        records = [
            _row_to_record(row)
            for row in session.scalars(select(UserRecordRow)).all()
        ]
        arrival_rows = session.scalars(
            select(WakeArrivalRow).order_by(WakeArrivalRow.position)
        ).all()
        return (
            LedgerSnapshot(
                current_month=Month.parse(state.current_month),
                current_year=state.current_year,
                stake_per_player_cents=state.stake_per_player_cents,
                player_count=state.player_count,
                records=records,
                last_closed=closed_period_from_json(state.last_closed),
            ),
            WakeSnapshot(
                roster=[str(uid) for uid in (state.wake_roster or [])],
                wake_date=state.wake_date,
                arrivals=[(row.user_id, row.arrived_at) for row in arrival_rows],
                names={
                    row.user_id: row.display_name
                    for row in arrival_rows
                    if row.display_name is not None
                },
            ),
        )


def restore_snapshot(engine: Engine, ledger: Ledger, wake: WakeOrderTracker) -> bool:
    """Load the stored snapshot into *ledger* / *wake*.  Returns False if none exists."""
    loaded = read_snapshot(engine)
    if loaded is None:
        logger.info("No snapshot found — starting with an empty ledger")
        return False
    ledger_snap, wake_snap = loaded
    with ledger.lock:
        ledger.restore(ledger_snap)
        wake.restore(wake_snap)
    return True
