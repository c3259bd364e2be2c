"""
streakboard.services.checkin_service — Inbound check-in handling
=================================================================

Turns a normalized :class:`CheckinEvent` into calls on the ledger / wake
tracker and the reply texts to post back.  Shared by the Discord cog and
the tests; it does no Discord I/O itself.

Routing::

    "!gym"   in the gym channel   → photo check → cheat check → award
    "!awake" in the wake channel  → photo check → arrival registration
    "!rank" / "!yearrank" / "!wakeorder" anywhere → text report

The photo's capture date must already be resolved by the caller (image
download and EXIF parsing happen before the ledger lock is taken).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING

from streakboard.constants import (
    AWAKE_COMMAND,
    GYM_COMMAND,
    RANK_COMMAND,
    WAKE_ORDER_COMMAND,
    YEAR_RANK_COMMAND,
    mention,
)
from streakboard.engine.anti_cheat import is_stale_capture
from streakboard.engine.records import AwardResult, WakeArrivalResult
from streakboard.services.reports import (
    build_monthly_ranking_report,
    build_wake_order_report,
    build_yearly_ranking_report,
)

if TYPE_CHECKING:
    from streakboard.config import StreakboardConfig
    from streakboard.engine.ledger import Ledger
    from streakboard.engine.wake import WakeOrderTracker

logger = logging.getLogger(__name__)


class CheckinKind(enum.StrEnum):
    """What an inbound message asks for."""
    GYM = "gym"
    AWAKE = "awake"
    RANK = "rank"
    YEAR_RANK = "year_rank"
    WAKE_ORDER = "wake_order"
    IGNORED = "ignored"


@dataclass(frozen=True, slots=True)
class CheckinEvent:
    """A chat message normalized for the scoring core."""

    user_id: str
    display_name: str
    channel_name: str
    message_text: str
    has_image_attachment: bool = False
    image_capture_date: date | None = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(slots=True)
class CheckinOutcome:
    kind: CheckinKind
    replies: list[str] = field(default_factory=list)
    award: AwardResult | None = None
    arrival: WakeArrivalResult | None = None
    penalty_total: int | None = None  # new month total after a cheat penalty

    @property
    def penalized(self) -> bool:
        return self.penalty_total is not None


class CheckinService:
    """Routes check-in events into the ledger and wake tracker."""

    def __init__(
        self,
        ledger: Ledger,
        wake: WakeOrderTracker,
        cfg: StreakboardConfig,
    ) -> None:
        self.ledger = ledger
        self.wake = wake
        self.cfg = cfg

    # -------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------
    def classify(self, event: CheckinEvent) -> CheckinKind:
        text = event.message_text.strip().lower()
        channel = event.channel_name.lower()

        if text == GYM_COMMAND:
            if channel == self.cfg.gym_channel_name.lower():
                return CheckinKind.GYM
            return CheckinKind.IGNORED
        if text.startswith(AWAKE_COMMAND):
            if channel == self.cfg.wake_channel_name.lower():
                return CheckinKind.AWAKE
            return CheckinKind.IGNORED
        if text == RANK_COMMAND:
            return CheckinKind.RANK
        if text == YEAR_RANK_COMMAND:
            return CheckinKind.YEAR_RANK
        if text == WAKE_ORDER_COMMAND:
            return CheckinKind.WAKE_ORDER
        return CheckinKind.IGNORED

    def handle(self, event: CheckinEvent) -> CheckinOutcome:
        """Process *event* and return what happened plus the replies to send."""
        kind = self.classify(event)
        if kind is CheckinKind.GYM:
            return self.handle_gym(event)
        if kind is CheckinKind.AWAKE:
            return self.handle_awake(event)
        if kind is CheckinKind.RANK:
            return CheckinOutcome(
                kind, [build_monthly_ranking_report(self.ledger.monthly_ranking())]
            )
        if kind is CheckinKind.YEAR_RANK:
            return CheckinOutcome(
                kind, [build_yearly_ranking_report(self.ledger.yearly_ranking())]
            )
        if kind is CheckinKind.WAKE_ORDER:
            return CheckinOutcome(
                kind, [build_wake_order_report(self.wake.build_order_summary())]
            )
        return CheckinOutcome(kind)

    # -------------------------------------------------------------------
    # !gym
    # -------------------------------------------------------------------
    def handle_gym(self, event: CheckinEvent) -> CheckinOutcome:
        outcome = CheckinOutcome(CheckinKind.GYM)
        name = event.display_name

        if not event.has_image_attachment:
            outcome.replies.append(
                f"{name}, please attach a photo to your {GYM_COMMAND} check-in."
            )
            return outcome

        today = event.timestamp.date()
        if is_stale_capture(
            event.image_capture_date, today, self.cfg.stale_image_days
        ):
            outcome.penalty_total = self.ledger.adjust_points(
                event.user_id, name, -self.cfg.cheat_penalty
            )
            logger.info(
                "Stale photo from %s (taken %s) — -%d points",
                name, event.image_capture_date, self.cfg.cheat_penalty,
            )
            outcome.replies.append(
                f"{mention(event.user_id)} used an old photo. "
                f"-{self.cfg.cheat_penalty} points!"
            )
            return outcome

        res = self.ledger.award_daily_points(event.user_id, name, today)
        outcome.award = res
        if res.accepted:
            logger.info(
                "Gym check-in: %s (+%d, streak %d)", name, res.points_added, res.current_streak
            )
            outcome.replies.append(
                f"{name} is pumping! (+{res.points_added} points, "
                f"streak: {res.current_streak})"
            )
        else:
            outcome.replies.append(
                f"{name}, you already checked in today. (points: {res.total_points})"
            )
        return outcome

    # -------------------------------------------------------------------
    # !awake
    # -------------------------------------------------------------------
    def handle_awake(self, event: CheckinEvent) -> CheckinOutcome:
        outcome = CheckinOutcome(CheckinKind.AWAKE)

        if not event.has_image_attachment:
            outcome.replies.append(f"Photo missing for {AWAKE_COMMAND}.")
            return outcome

        now = event.timestamp.time().replace(microsecond=0)
        res = self.wake.register_arrival(
            event.user_id, event.display_name, event.timestamp.date(), now
        )
        outcome.arrival = res
        who = mention(event.user_id)

        if not res.accepted:
            outcome.replies.append(
                f"{event.display_name}, you are already registered today "
                f"(#{res.position} at {res.time.strftime('%H:%M')})."
            )
            return outcome

        if res.is_first:
            outcome.replies.append(
                f"{who} is the earliest bird and caught the worm \U0001fab1!"
            )
            sleepers = self.wake.sleepers(event.user_id)
            if sleepers:
                outcome.replies.append(
                    " ".join(mention(uid) for uid in sleepers)
                    + "\nRise and shine, you slackers!"
                )
            return outcome

        expected = self.wake.expected_players()
        if res.is_last and expected > 0 and res.position >= expected:
            outcome.replies.append(
                f"{who} finally made it, and looks rough for someone who slept "
                "that long. Now everyone is awake!"
            )
            outcome.replies.append(
                build_wake_order_report(self.wake.build_order_summary())
            )
        else:
            outcome.replies.append(f"{who} finally made it. Slept in today, huh?")
        return outcome
