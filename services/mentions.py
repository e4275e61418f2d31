"""
Mention reconciliation service.

Processes Twitter mentions newer than the persisted cursor:
1. Fetch engagement profiles (list members) for prompt context
2. Fetch mentions newer than the cursor, ascending
3. For each mention:
   - Clean the leading @handles
   - Generate reply
   - Post reply
   - Advance and persist the cursor

One mention failing never blocks the ones after it. A failed mention leaves
the cursor where it was, so the next iteration fetches it again.
"""

import logging
import re
import time
from dataclasses import dataclass, field

from config.personality import SYSTEM_PROMPT
from config.prompts.mention_reply import ENGAGEMENT_PROFILES_BLOCK, MENTION_REPLY_PROMPT
from services.cursor import CursorStore, is_newer
from services.errors import BotError, Result
from services.llm import LLMClient
from services.twitter import BotIdentity, Mention, TwitterClient, shorten_to_fit

logger = logging.getLogger(__name__)

# Leading run of "@handle" tokens, e.g. "@bot @alice hello" -> "hello"
LEADING_MENTIONS = re.compile(r"^(@\w+ ?)+", re.ASCII)


def clean_mention_text(text: str) -> str:
    """Strip the addressing @handles from the start of a tweet."""
    return LEADING_MENTIONS.sub("", text).strip()


def build_reply_prompt(text: str, profiles: list[str]) -> str:
    """Build the user message for reply generation."""
    profiles_block = ""
    if profiles:
        profiles_block = ENGAGEMENT_PROFILES_BLOCK.format(
            profiles=", ".join(f"@{p}" for p in profiles)
        )
    return MENTION_REPLY_PROMPT.format(text=text, profiles_block=profiles_block)


def fit_tweet(text: str) -> str:
    """Truncate text to Twitter's weighted length limit."""
    return shorten_to_fit(text)


@dataclass
class LoopState:
    """Mutable state owned by the main loop and passed into each iteration."""

    cursor: str | None = None
    announced_commits: set[str] = field(default_factory=set)


class MentionReconciler:
    """Replies to new mentions and keeps the cursor in step."""

    def __init__(
        self,
        twitter: TwitterClient,
        llm: LLMClient,
        store: CursorStore,
        identity: BotIdentity,
        list_id: str
    ):
        self.twitter = twitter
        self.llm = llm
        self.store = store
        self.identity = identity
        self.list_id = list_id

    def fetch_profiles(self) -> Result[list[str]]:
        """Fetch handles of the engagement list."""
        try:
            return Result.success(self.twitter.get_list_member_handles(self.list_id))
        except BotError as e:
            return Result.failure(e)

    def fetch_mentions(self, since_id: str | None) -> Result[list[Mention]]:
        """Fetch mentions strictly newer than since_id, ascending."""
        try:
            mentions = self.twitter.get_mentions(self.identity.id, since_id=since_id)
        except BotError as e:
            return Result.failure(e)
        return Result.success(sorted(mentions, key=lambda m: m.sort_key))

    async def generate_reply(self, mention: Mention, profiles: list[str]) -> Result[str]:
        """Generate reply text for one mention."""
        prompt = build_reply_prompt(clean_mention_text(mention.text), profiles)
        try:
            text = await self.llm.generate(SYSTEM_PROMPT, prompt)
        except BotError as e:
            return Result.failure(e)
        return Result.success(fit_tweet(text))

    async def post_reply(self, mention: Mention, text: str) -> Result[str]:
        """Post text as a reply threaded to the mention."""
        try:
            return Result.success(await self.twitter.reply(text, mention.id))
        except BotError as e:
            return Result.failure(e)

    async def handle_mention(self, mention: Mention, profiles: list[str]) -> Result[str]:
        """
        Generate and post a reply.

        Returns:
            Result with the reply tweet ID.
        """
        reply = await self.generate_reply(mention, profiles)
        if not reply.ok:
            return Result.failure(reply.error)

        logger.info(f"[MENTIONS] {mention.id}: Reply: {reply.value[:50]}... ({len(reply.value)} chars)")
        return await self.post_reply(mention, reply.value)

    def advance_cursor(self, state: LoopState, mention_id: str) -> None:
        """
        Move the cursor to mention_id and persist it.

        A failed write is logged; the in-memory cursor still advances so the
        rest of this run does not reprocess the mention.
        """
        if not is_newer(mention_id, state.cursor):
            return

        saved = self.store.save(mention_id)
        if not saved.ok:
            logger.error(f"[MENTIONS] Cursor write FAILED, keeping {mention_id} in memory only: {saved.error}")
        state.cursor = mention_id

    async def process_mentions(self, state: LoopState) -> dict:
        """
        Run one reconciliation pass.

        Args:
            state: Loop state; its cursor is advanced per successful mention.

        Returns:
            Summary of what happened.
        """
        start_time = time.time()
        logger.info(f"[MENTIONS] === Starting batch (cursor={state.cursor}) ===")

        # Step 1: Engagement profiles
        profiles_result = self.fetch_profiles()
        if profiles_result.ok:
            profiles = profiles_result.value
            logger.info(f"[MENTIONS] [1/3] Loaded {len(profiles)} engagement profiles")
        else:
            profiles = []
            logger.error(f"[MENTIONS] [1/3] Profiles fetch FAILED, continuing without: {profiles_result.error}")

        # Step 2: Mentions newer than the cursor
        mentions_result = self.fetch_mentions(state.cursor)
        if not mentions_result.ok:
            logger.error(f"[MENTIONS] [2/3] Fetch FAILED: {mentions_result.error}")
            return {"success": False, "error": str(mentions_result.error), "cursor": state.cursor}

        mentions = mentions_result.value
        logger.info(f"[MENTIONS] [2/3] Found {len(mentions)} mentions")

        # Step 3: Reply to each, oldest first
        replied = []
        failed = []
        for i, mention in enumerate(mentions):
            who = f"@{mention.author}" if mention.author else mention.id
            logger.info(f"[MENTIONS] [3/3] [{i+1}/{len(mentions)}] Processing {who}...")

            result = await self.handle_mention(mention, profiles)
            if result.ok:
                self.advance_cursor(state, mention.id)
                replied.append(mention.id)
                logger.info(f"[MENTIONS] [3/3] [{i+1}/{len(mentions)}] {who}: OK")
            else:
                failed.append(mention.id)
                logger.warning(f"[MENTIONS] [3/3] [{i+1}/{len(mentions)}] {who}: FAILED - {result.error}")

        duration = round(time.time() - start_time, 1)
        logger.info(f"[MENTIONS] === Completed in {duration}s ===")
        logger.info(f"[MENTIONS] Summary: found={len(mentions)} | replied={len(replied)} | failed={len(failed)} | cursor={state.cursor}")

        return {
            "success": True,
            "found": len(mentions),
            "replied": replied,
            "failed": failed,
            "cursor": state.cursor,
            "duration_seconds": duration
        }
