"""
streakboard.services.reports — Outbound text reports
=====================================================

All message text the bot posts for rankings, payouts and the wake order
is built here from the engine's frozen result objects, so cogs and the
scheduled task only supply data.  Every builder returns a plain string
(Discord's 2000-character limit is handled by the sender).
"""

from __future__ import annotations

from streakboard.constants import RANK_BADGES, format_cents, mention
from streakboard.engine.ledger import ClosedPeriod, Month
from streakboard.engine.payout import PayoutPlan
from streakboard.engine.ranking import Ranking, RankingEntry
from streakboard.engine.wake import WakeOrderSummary

NO_MONTH_POINTS = "Nobody has scored any points yet."
NO_YEAR_POINTS = "Nobody has scored any points this year yet."
NO_MONTH_PARTICIPANTS = "No participants this month."
NO_YEAR_PARTICIPANTS = "No participants this year."
NO_STAKE = "No stake configured."
NO_WAKE_UPS = "No wake-ups registered today."


def _place(i: int) -> str:
    return RANK_BADGES[i - 1] if i <= len(RANK_BADGES) else f"{i}."


def _highscores(entry: RankingEntry) -> str:
    parts = []
    if entry.best_monthly_points > 0:
        parts.append(f"month HS: {entry.best_monthly_points}")
    if entry.best_yearly_points > 0:
        parts.append(f"year HS: {entry.best_yearly_points}")
    return "".join(f", {p}" for p in parts)


# ---------------------------------------------------------------------------
# Rankings
# ---------------------------------------------------------------------------
def build_monthly_ranking_report(ranking: Ranking) -> str:
    if ranking.is_empty:
        return NO_MONTH_POINTS
    lines = [f"\U0001f3c6 Current ranking ({ranking.period})"]
    for i, e in enumerate(ranking, start=1):
        lines.append(
            f"{_place(i)} {e.display_name} — points: {e.points}, "
            f"streak: {e.current_streak} (best: {e.best_streak})"
            f"{_highscores(e)}"
        )
    return "\n".join(lines)


def build_yearly_ranking_report(ranking: Ranking) -> str:
    if ranking.is_empty:
        return NO_YEAR_POINTS
    lines = [f"\U0001f3c6 Yearly ranking ({ranking.period})"]
    for i, e in enumerate(ranking, start=1):
        line = f"{_place(i)} {e.display_name} — year points: {e.points}"
        if e.best_streak > 0:
            line += f", best streak: {e.best_streak}"
        lines.append(line + _highscores(e))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------
def build_payouts_report(plan: PayoutPlan | None) -> str:
    if plan is None:
        return NO_STAKE
    if not plan.is_distributed:
        return (
            f"Total stake: {format_cents(plan.pot_cents)} — "
            "no split (too few players)."
        )
    lines = [
        f"\U0001f4b0 Pot: {format_cents(plan.pot_cents)} from "
        f"{plan.player_count} players ({format_cents(plan.stake_per_player_cents)} each)"
    ]
    lines.extend(
        f"{p.place}. {p.display_name}: {format_cents(p.cents)}" for p in plan.payouts
    )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Period summaries
# ---------------------------------------------------------------------------
def build_month_end_report(
    ranking: Ranking, month: Month, payouts: PayoutPlan | None
) -> str:
    """Winner, payout split and full ranking of *month*."""
    winner = ranking.winner
    if winner is None:
        return NO_MONTH_PARTICIPANTS
    return (
        f"\U0001f38a Winner of {month.label}: {winner.display_name} "
        f"with {winner.points} points!\n\n"
        f"{build_payouts_report(payouts)}\n\n"
        f"{build_monthly_ranking_report(ranking)}"
    )


def build_year_end_report(ranking: Ranking, year: int) -> str:
    """Winner and ranking of *year*; last place owes everyone a meal."""
    winner, last = ranking.winner, ranking.last
    if winner is None or last is None:
        return NO_YEAR_PARTICIPANTS
    return (
        f"\U0001f38a Winner of {year}: {winner.display_name} "
        f"with {winner.points} points!\n\n"
        f"{build_yearly_ranking_report(ranking)}\n\n"
        f"{mention(last.user_id)} has to buy everyone a big meal."
    )


def build_closed_period_reports(closed: ClosedPeriod) -> list[str]:
    """Month-end (and year-end, when a year closed) reports for *closed*."""
    reports = [build_month_end_report(closed.monthly, closed.month, closed.payouts)]
    if closed.year is not None and closed.yearly is not None:
        reports.append(build_year_end_report(closed.yearly, closed.year))
    return reports


# ---------------------------------------------------------------------------
# Wake order
# ---------------------------------------------------------------------------
def build_wake_order_report(summary: WakeOrderSummary | None) -> str:
    if summary is None:
        return NO_WAKE_UPS
    lines = [f"⏰ Wake-up order for {summary.date.isoformat()}"]
    lines.extend(
        f"{a.position}. {a.display_name} — {a.time.strftime('%H:%M:%S')}"
        for a in summary.arrivals
    )
    lines.append("")
    lines.append(
        f"\U0001f426 Early bird: {summary.first.display_name} — "
        f"streak: {summary.first_current_streak} (best: {summary.first_best_streak})"
    )
    return "\n".join(lines)
