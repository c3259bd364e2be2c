"""
streakboard.bot.__main__ — Entry point for ``python -m streakboard.bot``
=======================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (soft settings).
3. Build the in-memory core (ledger + wake tracker).
4. If DATABASE_URL is set: create the engine, ensure tables exist and
   restore the last snapshot.
5. Create the StreakboardBot and hand it everything.
6. Start the bot (blocking — runs the asyncio event loop).
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime

from dotenv import load_dotenv

from streakboard.bot.core import StreakboardBot
from streakboard.config import load_config
from streakboard.database.engine import create_db_engine, init_db
from streakboard.engine.ledger import Ledger
from streakboard.engine.wake import WakeOrderTracker
from streakboard.services.snapshot_service import restore_snapshot

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("streakboard")


def main() -> None:
    """Bootstrap and run the Streakboard bot."""

    # 1. Environment variables (secrets).
    load_dotenv()

    token = os.getenv("DISCORD_TOKEN")
    if not token or token == "your-discord-bot-token-here":
        logger.critical(
            "DISCORD_TOKEN is not set.  "
            "Copy .env.example → .env and paste your bot token."
        )
        sys.exit(1)

    # 2. Soft configuration.
    cfg = load_config()
    logger.info("Config loaded — Community: %s", cfg.community_name)

    # 3. Scoring core.
    ledger = Ledger(cfg.points_per_gym, today=datetime.now(cfg.tz).date())
    wake = WakeOrderTracker(ledger)

    # 4. Optional persistence.
    engine = None
    if os.getenv("DATABASE_URL"):
        engine = create_db_engine()
        init_db(engine)
        restore_snapshot(engine, ledger, wake)

    # 5. Bot.
    bot = StreakboardBot(cfg=cfg, ledger=ledger, wake=wake, engine=engine)

    # 6. Run (blocks until Ctrl+C or SIGTERM).
    logger.info("Starting Streakboard bot…")
    try:
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
