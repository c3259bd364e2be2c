"""
streakboard.database.models — SQLAlchemy 2.0 Snapshot Models
=============================================================

The scoring core lives in memory; these tables only hold periodic
snapshots of it so a restart does not wipe the month.

Tables:
- user_records  — one row per UserRecord
- ledger_state  — single row: period markers, stake config, wake window,
                  standings of the last closed month
- wake_arrivals — today's wake-up registrations, in arrival order
"""

from __future__ import annotations

from datetime import date, datetime, time

from sqlalchemy import JSON, Date, DateTime, Integer, String, Time, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all Streakboard ORM models."""


# ---------------------------------------------------------------------------
# User records
# ---------------------------------------------------------------------------
class UserRecordRow(Base):
    __tablename__ = "user_records"

    user_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    month_points: Mapped[int] = mapped_column(Integer, default=0)
    year_points: Mapped[int] = mapped_column(Integer, default=0)
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    best_streak: Mapped[int] = mapped_column(Integer, default=0)
    best_monthly_points: Mapped[int] = mapped_column(Integer, default=0)
    best_yearly_points: Mapped[int] = mapped_column(Integer, default=0)
    last_award_date: Mapped[date | None] = mapped_column(Date, default=None)

    wake_first_current_streak: Mapped[int] = mapped_column(Integer, default=0)
    wake_first_best_streak: Mapped[int] = mapped_column(Integer, default=0)
    last_wake_first_date: Mapped[date | None] = mapped_column(Date, default=None)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return (
            f"<UserRecordRow id={self.user_id} name={self.display_name!r} "
            f"pts={self.month_points}>"
        )


# ---------------------------------------------------------------------------
# Ledger state — always exactly one row (id=1)
# ---------------------------------------------------------------------------
class LedgerStateRow(Base):
    __tablename__ = "ledger_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    current_month: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM
    current_year: Mapped[int] = mapped_column(Integer, nullable=False)
    stake_per_player_cents: Mapped[int] = mapped_column(Integer, default=0)
    player_count: Mapped[int] = mapped_column(Integer, default=0)
    wake_roster: Mapped[list] = mapped_column(JSON, default=list)
    wake_date: Mapped[date | None] = mapped_column(Date, default=None)
    last_closed: Mapped[dict | None] = mapped_column(JSON, default=None)  # ClosedPeriod as JSON
    saved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


# ---------------------------------------------------------------------------
# Wake arrivals for the current wake window
# ---------------------------------------------------------------------------
class WakeArrivalRow(Base):
    __tablename__ = "wake_arrivals"

    user_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    arrived_at: Mapped[time] = mapped_column(Time, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(100), default=None)
