"""
streakboard.config — YAML Configuration Loader
===============================================

Reads ``config.yaml`` for the bot's identity, channel names and scoring
knobs.  Secrets (``DISCORD_TOKEN``, ``DATABASE_URL``) stay in the
environment / ``.env``.

Usage::

    from streakboard.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.gym_channel_name)  # "╠►pumper"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from pathlib import Path
from zoneinfo import ZoneInfo

import yaml

from streakboard.engine.anti_cheat import DEFAULT_CHEAT_PENALTY, DEFAULT_STALE_DAYS
from streakboard.engine.ledger import DEFAULT_POINTS_PER_AWARD


@dataclass(frozen=True, slots=True)
class StreakboardConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Identity
    community_name: str

    # Discord
    bot_prefix: str
    guild_id: int
    owner_id: str  # The only user allowed to run restricted admin commands

    # Channels (matched by name, case-insensitive)
    gym_channel_name: str
    wake_channel_name: str

    # Scoring
    points_per_gym: int = DEFAULT_POINTS_PER_AWARD
    cheat_penalty: int = DEFAULT_CHEAT_PENALTY
    stale_image_days: int = DEFAULT_STALE_DAYS

    # Scheduling
    daily_task_time: time = time(7, 0)
    timezone: str = "Europe/Berlin"

    # Persistence (only used when DATABASE_URL is set)
    snapshot_interval_minutes: int = 10

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _parse_time(raw: str | None, default: time) -> time:
    if not raw:
        return default
    hour, minute = str(raw).split(":", 1)
    return time(int(hour), int(minute))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> StreakboardConfig:
    """Read *path* and return a :class:`StreakboardConfig` instance.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return StreakboardConfig(
        community_name=raw["community_name"],
        bot_prefix=raw.get("bot_prefix", "!"),
        guild_id=int(raw["guild_id"]),
        owner_id=str(raw["owner_id"]),
        gym_channel_name=raw["gym_channel_name"],
        wake_channel_name=raw["wake_channel_name"],
        points_per_gym=int(raw.get("points_per_gym", DEFAULT_POINTS_PER_AWARD)),
        cheat_penalty=int(raw.get("cheat_penalty", DEFAULT_CHEAT_PENALTY)),
        stale_image_days=int(raw.get("stale_image_days", DEFAULT_STALE_DAYS)),
        daily_task_time=_parse_time(raw.get("daily_task_time"), time(7, 0)),
        timezone=raw.get("timezone", "Europe/Berlin"),
        snapshot_interval_minutes=int(raw.get("snapshot_interval_minutes", 10)),
    )
