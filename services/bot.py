"""
Bot startup and main loop.

Startup builds the clients, resolves the bot account and loads the cursor;
any failure there is an InitializationError and stops the process. The loop
then runs forever: mentions, commit announcements, sleep.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from config.settings import Settings
from services.commits import CommitAnnouncer
from services.cursor import CursorStore
from services.errors import BotError, InitializationError, PlatformAPIError, Result
from services.github import GitHubFeed
from services.llm import LLMClient
from services.mentions import LoopState, MentionReconciler
from services.twitter import BotIdentity, TwitterClient

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class Bot:
    """Everything the loop needs, fixed for the process lifetime."""

    identity: BotIdentity
    mentions: MentionReconciler
    commits: CommitAnnouncer
    check_interval: float


def create_clients(config: Settings) -> Result[tuple[TwitterClient, LLMClient]]:
    """Build the Twitter and LLM clients from settings."""
    try:
        return Result.success((TwitterClient(config), LLMClient(config)))
    except InitializationError as e:
        return Result.failure(e)


def initialize_bot(
    config: Settings,
    twitter: TwitterClient,
    llm: LLMClient,
    feed: GitHubFeed | None = None,
    store: CursorStore | None = None
) -> Result[tuple[Bot, LoopState]]:
    """
    Resolve the bot account and load the persisted cursor.

    Returns:
        Result with the Bot and its initial LoopState, or InitializationError.
    """
    try:
        identity = twitter.get_me()
    except PlatformAPIError as e:
        return Result.failure(InitializationError("could not resolve bot account", e))

    store = store or CursorStore(config.cursor_file)
    loaded = store.load()
    if loaded.ok:
        cursor = loaded.value
    else:
        # Same as a missing file: every visible mention is processed again
        logger.error(f"[BOT] Cursor load FAILED, starting without cursor: {loaded.error}")
        cursor = None

    bot = Bot(
        identity=identity,
        mentions=MentionReconciler(twitter, llm, store, identity, config.engagement_list_id),
        commits=CommitAnnouncer(twitter, feed or GitHubFeed(config)),
        check_interval=config.check_interval_seconds
    )
    return Result.success((bot, LoopState(cursor=cursor)))


async def run_iteration(bot: Bot, state: LoopState) -> dict:
    """One pass: mentions, then commit announcements."""
    start_time = time.time()
    mentions = await bot.mentions.process_mentions(state)
    commits = await bot.commits.announce(state)
    duration = round(time.time() - start_time, 1)
    logger.info(f"[BOT] Iteration done in {duration}s | cursor={state.cursor}")
    return {"mentions": mentions, "commits": commits, "duration_seconds": duration}


async def run_forever(bot: Bot, state: LoopState, sleep: Sleep = asyncio.sleep) -> None:
    """
    Run iterations until the task is cancelled.

    Errors escaping an iteration are logged and the loop carries on after the
    usual sleep. Cancellation (SIGINT/SIGTERM) propagates immediately.
    """
    logger.info(f"[BOT] Running as @{bot.identity.username} every {bot.check_interval}s")
    iteration = 0
    while True:
        iteration += 1
        logger.info(f"[BOT] === Iteration #{iteration} ===")
        try:
            await run_iteration(bot, state)
        except BotError as e:
            if e.fatal:
                raise
            logger.error(f"[BOT] Error in main loop: {e}")
        except Exception as e:
            logger.error(f"[BOT] Error in main loop: {e}")
            logger.exception(e)

        await sleep(bot.check_interval)
