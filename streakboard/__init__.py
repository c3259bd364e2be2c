"""
Streakboard — Gym & Wake-up Streaks for a Discord Community
============================================================
Tracks "!gym" and "!awake" check-ins, turns them into points and streaks,
ranks members per month and per year, and splits a shared stake pot
between the top finishers.

Package layout::

    streakboard/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Presentation constants, money & mention helpers
    ├── bridge.py          # run_blocking: sync core → asyncio
    ├── engine/
    │   ├── records.py     # UserRecord + result envelopes
    │   ├── ledger.py      # Points, streaks, month/year rollover (the lock)
    │   ├── ranking.py     # Monthly / yearly leaderboards
    │   ├── payout.py      # Weighted stake pot split
    │   ├── wake.py        # Same-day wake-up order
    │   └── anti_cheat.py  # Stale photo detection
    ├── services/
    │   ├── checkin_service.py  # Inbound check-in routing
    │   ├── admin_service.py    # Owner-only mutations
    │   ├── reports.py          # Outbound text reports
    │   ├── image_metadata.py   # EXIF capture date (Pillow)
    │   └── snapshot_service.py # Persist / restore core state
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + session helper
    │   └── models.py      # Snapshot tables
    ├── bot/
    │   ├── core.py        # Bot subclass, cog loader
    │   └── cogs/
    │       ├── checkins.py  # on_message: !gym, !awake, !rank …
    │       ├── reports.py   # /rank, /yearrank, /wakeorder, /payouts, /monthend
    │       ├── admin.py     # /setpoints, /setstreak, /setstake, …
    │       └── tasks.py     # Daily trigger + snapshots
    └── api/
        ├── main.py        # FastAPI app
        └── routes/        # Read-only public endpoints
"""

__version__ = "0.1.0"
