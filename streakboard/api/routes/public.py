"""
streakboard.api.routes.public — Read-only public endpoints
===========================================================
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from streakboard.api.deps import CoreView, get_core
from streakboard.engine.ranking import Ranking

router = APIRouter(tags=["public"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------
class RankingEntryOut(BaseModel):
    place: int
    user_id: str
    display_name: str
    points: int
    current_streak: int
    best_streak: int
    best_monthly_points: int
    best_yearly_points: int


class RankingOut(BaseModel):
    period: str
    entries: list[RankingEntryOut]


class PayoutOut(BaseModel):
    place: int
    user_id: str
    display_name: str
    cents: int


class PayoutPlanOut(BaseModel):
    configured: bool
    pot_cents: int = 0
    player_count: int = 0
    stake_per_player_cents: int = 0
    distributed: bool = False
    payouts: list[PayoutOut] = []


class WakeArrivalOut(BaseModel):
    position: int
    user_id: str
    display_name: str
    time: str


class WakeOrderOut(BaseModel):
    date: date | None
    arrivals: list[WakeArrivalOut]
    first_current_streak: int = 0
    first_best_streak: int = 0


def _ranking_out(ranking: Ranking) -> RankingOut:
    return RankingOut(
        period=ranking.period,
        entries=[
            RankingEntryOut(
                place=i,
                user_id=e.user_id,
                display_name=e.display_name,
                points=e.points,
                current_streak=e.current_streak,
                best_streak=e.best_streak,
                best_monthly_points=e.best_monthly_points,
                best_yearly_points=e.best_yearly_points,
            )
            for i, e in enumerate(ranking, start=1)
        ],
    )


# ---------------------------------------------------------------------------
# GET /rankings/{period}
# ---------------------------------------------------------------------------
@router.get("/rankings/{period}", response_model=RankingOut)
def get_ranking(period: str, core: CoreView = Depends(get_core)):
    """Monthly or yearly leaderboard from the latest snapshot."""
    if period == "monthly":
        return _ranking_out(core.ledger.monthly_ranking())
    if period == "yearly":
        return _ranking_out(core.ledger.yearly_ranking())
    raise HTTPException(status.HTTP_404_NOT_FOUND, f"Unknown period: {period}")


# ---------------------------------------------------------------------------
# GET /payouts
# ---------------------------------------------------------------------------
@router.get("/payouts", response_model=PayoutPlanOut)
def get_payouts(core: CoreView = Depends(get_core)):
    """Current pot split over the monthly ranking."""
    plan = core.ledger.payout_plan()
    if plan is None:
        return PayoutPlanOut(configured=False)
    return PayoutPlanOut(
        configured=True,
        pot_cents=plan.pot_cents,
        player_count=plan.player_count,
        stake_per_player_cents=plan.stake_per_player_cents,
        distributed=plan.is_distributed,
        payouts=[
            PayoutOut(
                place=p.place,
                user_id=p.user_id,
                display_name=p.display_name,
                cents=p.cents,
            )
            for p in plan.payouts
        ],
    )


# ---------------------------------------------------------------------------
# GET /wake-order
# ---------------------------------------------------------------------------
@router.get("/wake-order", response_model=WakeOrderOut)
def get_wake_order(core: CoreView = Depends(get_core)):
    """Today's wake-up order (empty when nobody registered)."""
    summary = core.wake.build_order_summary()
    if summary is None:
        return WakeOrderOut(date=None, arrivals=[])
    return WakeOrderOut(
        date=summary.date,
        arrivals=[
            WakeArrivalOut(
                position=a.position,
                user_id=a.user_id,
                display_name=a.display_name,
                time=a.time.isoformat(),
            )
            for a in summary.arrivals
        ],
        first_current_streak=summary.first_current_streak,
        first_best_streak=summary.first_best_streak,
    )
