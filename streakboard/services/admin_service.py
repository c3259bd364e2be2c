"""
streakboard.services.admin_service — Owner-only ledger mutations
=================================================================

Shared by the slash-command cog and the tests.  Every restricted command
checks the invoker against the configured owner id *before* looking at
its options; nothing is mutated when either check fails.  All outcomes
are returned as a :class:`CommandReply` — nothing here raises for bad
user input.

Commands:
- set_points / set_streak — overwrite a member's month points / streak
- set_stake — per-player stake in major currency units (≤ 2 decimals)
- set_player_count — number of players paying into the pot
- set_wake_roster — expected wake-up participants (mention list)
- designate — cosmetic, open to everyone
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from streakboard.constants import format_cents, mention, parse_mentions

if TYPE_CHECKING:
    from streakboard.engine.ledger import Ledger
    from streakboard.engine.wake import WakeOrderTracker

logger = logging.getLogger(__name__)

DENIED_MESSAGE = "\U0001f512 Only the owner may use this command."


class CommandInputError(ValueError):
    """A command option is missing or malformed."""


@dataclass(frozen=True, slots=True)
class CommandReply:
    message: str
    ephemeral: bool = False
    applied: bool = True


def _missing(option: str) -> CommandReply:
    return CommandReply(f"Missing option: {option}", ephemeral=True, applied=False)


def _invalid(reason: str) -> CommandReply:
    return CommandReply(f"❌ {reason}", ephemeral=True, applied=False)


def parse_stake(raw: str | float | Decimal | None) -> Decimal:
    """Parse a stake in major units with at most two decimal places.

    Raises
    ------
    CommandInputError
        If *raw* is missing, not a number, negative or too precise.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise CommandInputError("Missing option: amount")
    try:
        amount = Decimal(str(raw).strip().replace(",", "."))
    except InvalidOperation as exc:
        raise CommandInputError(f"Not a number: {raw!r}") from exc
    if not amount.is_finite():
        raise CommandInputError(f"Not a number: {raw!r}")
    if amount < 0:
        raise CommandInputError("The stake must not be negative.")
    if amount.normalize().as_tuple().exponent < -2:
        raise CommandInputError("At most two decimal places are allowed.")
    return amount


class AdminService:
    """Applies administrative commands to the ledger and wake tracker."""

    def __init__(self, ledger: Ledger, wake: WakeOrderTracker, owner_id: str) -> None:
        self.ledger = ledger
        self.wake = wake
        self.owner_id = str(owner_id)

    def is_owner(self, invoker_id: str) -> bool:
        return str(invoker_id) == self.owner_id

    def _denied(self, invoker_id: str, command: str) -> CommandReply:
        logger.warning("Denied /%s for non-owner %s", command, invoker_id)
        return CommandReply(DENIED_MESSAGE, ephemeral=True, applied=False)

    # -------------------------------------------------------------------
    # Points & streaks
    # -------------------------------------------------------------------
    def set_points(
        self,
        invoker_id: str,
        target_id: str | None,
        target_name: str | None,
        value: int | None,
    ) -> CommandReply:
        if not self.is_owner(invoker_id):
            return self._denied(invoker_id, "setpoints")
        if target_id is None or target_name is None:
            return _missing("member")
        if value is None:
            return _missing("points")

        total = self.ledger.set_points(str(target_id), target_name, value)
        logger.info("Owner set points of %s to %d", target_name, total)
        return CommandReply(f"Points of {target_name} set to {total}.")

    def set_streak(
        self,
        invoker_id: str,
        target_id: str | None,
        target_name: str | None,
        value: int | None,
    ) -> CommandReply:
        if not self.is_owner(invoker_id):
            return self._denied(invoker_id, "setstreak")
        if target_id is None or target_name is None:
            return _missing("member")
        if value is None:
            return _missing("streak")

        applied = self.ledger.set_streak(str(target_id), target_name, value)
        logger.info("Owner set streak of %s to %d", target_name, applied)
        return CommandReply(f"Streak of {target_name} set to {applied}.")

    # -------------------------------------------------------------------
    # Stake pot
    # -------------------------------------------------------------------
    def set_stake(
        self, invoker_id: str, amount: str | float | Decimal | None
    ) -> CommandReply:
        if not self.is_owner(invoker_id):
            return self._denied(invoker_id, "setstake")
        try:
            parsed = parse_stake(amount)
        except CommandInputError as exc:
            return _invalid(str(exc))

        cents = self.ledger.set_stake(parsed)
        return CommandReply(f"Stake per player set to {format_cents(cents)}.")

    def set_player_count(self, invoker_id: str, count: int | None) -> CommandReply:
        if not self.is_owner(invoker_id):
            return self._denied(invoker_id, "setplayer")
        if count is None:
            return _missing("count")

        applied = self.ledger.set_player_count(count)
        return CommandReply(f"Player count set to {applied}.")

    # -------------------------------------------------------------------
    # Wake roster
    # -------------------------------------------------------------------
    def set_wake_roster(self, invoker_id: str, raw: str | None) -> CommandReply:
        if not self.is_owner(invoker_id):
            return self._denied(invoker_id, "setwakeplayers")
        if raw is None:
            return _missing("players")

        size = self.wake.set_roster(parse_mentions(raw))
        logger.info("Wake roster set to %d players", size)
        return CommandReply(f"Wake-up players set: {size}")

    # -------------------------------------------------------------------
    # Cosmetic
    # -------------------------------------------------------------------
    def designate(self, invoker_id: str, target_id: str | None) -> CommandReply:
        """Publicly call someone a servant.  Aimed at the owner, it backfires."""
        if target_id is None:
            return _missing("member")
        if str(target_id) == self.owner_id and not self.is_owner(invoker_id):
            return CommandReply(f"{mention(str(invoker_id))} is a servant themself.")
        return CommandReply(f"{mention(str(target_id))} is a servant.")
