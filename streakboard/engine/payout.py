"""
streakboard.engine.payout — Weighted split of the stake pot
============================================================

Every configured player pays the same stake into a pot.  The top ``n``
finishers (``n = min(player_count, ranked users)``) share it with linear
descending weights: 1st gets ``n-1``, 2nd ``n-2`` … the n-th gets 0.

Rounding is round-half-up per payout, done in integer arithmetic so the
result never depends on float behaviour.  The rounding error is *not*
redistributed; the payouts may miss the pot by up to ``n-1`` cents.
"""

from __future__ import annotations

from dataclasses import dataclass

from streakboard.engine.ranking import Ranking

__all__ = ["Payout", "PayoutPlan", "compute_payouts", "round_half_up_div"]


@dataclass(frozen=True, slots=True)
class Payout:
    place: int
    user_id: str
    display_name: str
    cents: int


@dataclass(frozen=True, slots=True)
class PayoutPlan:
    """Pot size and per-place payouts.

    An empty ``payouts`` tuple means "pot known, too few ranked players
    to split it".
    """

    pot_cents: int
    player_count: int
    stake_per_player_cents: int
    payouts: tuple[Payout, ...] = ()

    @property
    def is_distributed(self) -> bool:
        return bool(self.payouts)

    @property
    def total_paid_cents(self) -> int:
        return sum(p.cents for p in self.payouts)


def round_half_up_div(numerator: int, denominator: int) -> int:
    """``round(numerator / denominator)`` with halves rounded up (non-negative inputs)."""
    return (2 * numerator + denominator) // (2 * denominator)


def compute_payouts(
    ranking: Ranking, player_count: int, stake_per_player_cents: int
) -> PayoutPlan | None:
    """Distribute the pot over *ranking*.

    Returns ``None`` when no stake configuration is set (player count or
    stake not positive).
    """
    if player_count <= 0 or stake_per_player_cents <= 0:
        return None

    pot = player_count * stake_per_player_cents
    n = min(player_count, len(ranking))
    if n <= 1:
        return PayoutPlan(pot, player_count, stake_per_player_cents)

    sum_weights = n * (n - 1) // 2
    payouts = tuple(
        Payout(
            place=i + 1,
            user_id=entry.user_id,
            display_name=entry.display_name,
            cents=round_half_up_div(pot * (n - 1 - i), sum_weights),
        )
        for i, entry in enumerate(ranking.entries[:n])
    )
    return PayoutPlan(pot, player_count, stake_per_player_cents, payouts)
