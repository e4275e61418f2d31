"""
VanGogh Twitter Bot - mention replies and commit announcements.

Long-running polling loop:
1. Reply to mentions newer than the persisted cursor
2. Announce new GitHub commits
3. Sleep, repeat

Run auth.py first to obtain TWITTER_ACCESS_TOKEN / TWITTER_ACCESS_SECRET.
"""

import asyncio
import logging
import signal
import sys

from config.settings import settings
from services.bot import create_clients, initialize_bot, run_forever
from utils.logs import configure_logging

logger = logging.getLogger(__name__)


def exit_now(signum, frame) -> None:
    """
    Signal handler: leave immediately, even mid-request.

    Raised from the main thread, so it also interrupts blocking tweepy
    calls. The cursor only covers fully handled mentions.
    """
    logger.info(f"Received {signal.Signals(signum).name}, bot stopped")
    raise SystemExit(0)


def install_signal_handlers() -> None:
    # Replaces asyncio's own SIGINT handling, which only cancels at the next await
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, exit_now)


async def run() -> int:
    """Start the bot and run until a signal arrives. Returns the exit code."""
    clients_result = create_clients(settings)
    if not clients_result.ok:
        logger.error(f"Failed to create clients: {clients_result.error}")
        return 1
    twitter, llm = clients_result.value

    bot_result = initialize_bot(settings, twitter, llm)
    if not bot_result.ok:
        logger.error(f"Failed to initialize bot: {bot_result.error}")
        return 1
    bot, state = bot_result.value

    logger.info("=" * 50)
    logger.info(f"TWITTER ACCOUNT: @{bot.identity.username}")
    logger.info(f"TWITTER ID: {bot.identity.id}")
    logger.info(f"CURSOR: {state.cursor or 'none'}")
    logger.info("=" * 50)

    await run_forever(bot, state)
    return 0


def main() -> None:
    configure_logging(settings.log_file)
    install_signal_handlers()
    try:
        code = asyncio.run(run())
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
