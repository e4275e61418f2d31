"""Tests for mention reconciliation."""

import httpx
import pytest

from services.llm import LLMClient
from services.mentions import (
    LoopState,
    MentionReconciler,
    build_reply_prompt,
    clean_mention_text,
    fit_tweet,
)
from services.twitter import fits_tweet
from tests.conftest import BOT, FailingStore, completion, mention


class TestCleanMentionText:
    """Leading @handle stripping."""

    def test_strips_leading_mentions(self):
        assert clean_mention_text("@bot @alice hello there") == "hello there"

    def test_text_without_mentions_unchanged(self):
        assert clean_mention_text("no mentions here") == "no mentions here"

    def test_keeps_inline_mentions(self):
        assert clean_mention_text("@bot ask @alice about ears") == "ask @alice about ears"

    def test_only_mentions_gives_empty(self):
        assert clean_mention_text("@bot @alice") == ""


class TestPrompt:

    def test_includes_text_and_profiles(self):
        prompt = build_reply_prompt("hello there", ["alice", "bob"])
        assert "hello there" in prompt
        assert "@alice, @bob" in prompt

    def test_no_profiles_block_when_empty(self):
        prompt = build_reply_prompt("hello there", [])
        assert "Profiles you engage with" not in prompt

    def test_fit_tweet_truncates(self):
        text = fit_tweet("x" * 300)
        assert len(text) <= 280
        assert fits_tweet(text)
        assert text.endswith("...")

    def test_fit_tweet_keeps_short_text(self):
        assert fit_tweet("x" * 280) == "x" * 280

    def test_fit_tweet_counts_emoji_double(self):
        # 200 emoji weigh 400, over the limit despite being 200 code points
        text = fit_tweet("\U0001F33B" * 200)
        assert fits_tweet(text)
        assert text.endswith("...")
        assert len(text) < 200


class TestProcessMentions:
    """Cursor advancement and failure isolation."""

    @pytest.mark.asyncio
    async def test_replies_in_ascending_order_and_advances_cursor(self, reconciler, twitter, store):
        twitter.mentions = [mention(30), mention(10), mention(20)]
        state = LoopState()

        result = await reconciler.process_mentions(state)

        assert [tweet_id for tweet_id, _ in twitter.replies] == ["10", "20", "30"]
        assert result["replied"] == ["10", "20", "30"]
        assert state.cursor == "30"
        assert store.load().value == "30"

    @pytest.mark.asyncio
    async def test_empty_cursor_fetches_without_lower_bound(self, reconciler, twitter):
        await reconciler.process_mentions(LoopState(cursor=None))
        assert ("get_mentions", BOT.id, None) in twitter.calls

    @pytest.mark.asyncio
    async def test_fetches_strictly_newer_than_cursor(self, reconciler, twitter):
        twitter.mentions = [mention(10), mention(20)]
        state = LoopState(cursor="10")

        await reconciler.process_mentions(state)

        assert ("get_mentions", BOT.id, "10") in twitter.calls
        assert [tweet_id for tweet_id, _ in twitter.replies] == ["20"]

    @pytest.mark.asyncio
    async def test_completion_failure_does_not_block_later_mentions(self, reconciler, twitter, store):
        twitter.mentions = [
            mention(10),
            mention(20, text="@vangogh_bot FAIL_LLM"),
            mention(30),
        ]
        state = LoopState()

        result = await reconciler.process_mentions(state)

        assert [tweet_id for tweet_id, _ in twitter.replies] == ["10", "30"]
        assert result["failed"] == ["20"]
        assert state.cursor == "30"

    @pytest.mark.asyncio
    async def test_malformed_completion_does_not_block_later_mentions(self, config, twitter, store):
        bodies = iter([
            completion(["not", "a", "string"]),
            completion("Ears are overrated."),
        ])
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json=next(bodies)))
        reconciler = MentionReconciler(twitter, LLMClient(config, transport=transport), store, BOT, list_id="123")
        twitter.mentions = [mention(10), mention(20)]
        state = LoopState()

        result = await reconciler.process_mentions(state)

        assert result["failed"] == ["10"]
        assert [tweet_id for tweet_id, _ in twitter.replies] == ["20"]
        assert state.cursor == "20"
        assert store.load().value == "20"

    @pytest.mark.asyncio
    async def test_post_failure_does_not_block_later_mentions(self, reconciler, twitter):
        twitter.mentions = [mention(10), mention(20), mention(30)]
        twitter.fail_replies_to = {"10"}
        state = LoopState()

        result = await reconciler.process_mentions(state)

        assert result["failed"] == ["10"]
        assert result["replied"] == ["20", "30"]
        assert state.cursor == "30"

    @pytest.mark.asyncio
    async def test_cursor_stays_at_last_success(self, reconciler, twitter, store):
        twitter.mentions = [mention(10), mention(20)]
        twitter.fail_replies_to = {"20"}
        state = LoopState(cursor="5")

        await reconciler.process_mentions(state)

        assert state.cursor == "10"
        assert store.load().value == "10"

    @pytest.mark.asyncio
    async def test_all_failures_leave_cursor_unchanged(self, reconciler, twitter, store):
        twitter.mentions = [mention(10), mention(20)]
        twitter.fail_replies_to = {"10", "20"}
        state = LoopState(cursor="5")

        await reconciler.process_mentions(state)

        assert state.cursor == "5"
        assert store.load().value is None

    @pytest.mark.asyncio
    async def test_failed_mention_is_fetched_again_next_iteration(self, reconciler, twitter):
        twitter.mentions = [mention(10)]
        twitter.fail_replies_to = {"10"}
        state = LoopState()

        await reconciler.process_mentions(state)
        twitter.fail_replies_to = set()
        await reconciler.process_mentions(state)

        assert [tweet_id for tweet_id, _ in twitter.replies] == ["10"]
        assert state.cursor == "10"

    @pytest.mark.asyncio
    async def test_fetch_failure_leaves_cursor_unchanged(self, reconciler, twitter):
        twitter.fail_mentions = True
        state = LoopState(cursor="7")

        result = await reconciler.process_mentions(state)

        assert result["success"] is False
        assert state.cursor == "7"
        assert not twitter.replies

    @pytest.mark.asyncio
    async def test_profiles_failure_continues_with_empty_list(self, reconciler, twitter, llm):
        twitter.fail_profiles = True
        twitter.mentions = [mention(10)]

        await reconciler.process_mentions(LoopState())

        assert twitter.replies
        _, user_prompt = llm.prompts[0]
        assert "Profiles you engage with" not in user_prompt

    @pytest.mark.asyncio
    async def test_prompt_uses_cleaned_text_and_profiles(self, reconciler, twitter, llm):
        twitter.profiles = ["alice"]
        twitter.mentions = [mention(10, text="@vangogh_bot @bob paint me a sunflower")]

        await reconciler.process_mentions(LoopState())

        system, user_prompt = llm.prompts[0]
        assert "VanGogh" in system
        assert "Reply to this tweet: paint me a sunflower" in user_prompt
        assert "@alice" in user_prompt

    @pytest.mark.asyncio
    async def test_cursor_write_failure_still_advances_in_memory(self, twitter, llm):
        store = FailingStore()
        reconciler = MentionReconciler(twitter, llm, store, BOT, list_id="123")
        twitter.mentions = [mention(10), mention(20)]
        state = LoopState()

        await reconciler.process_mentions(state)

        assert store.attempts == ["10", "20"]
        assert state.cursor == "20"

    def test_advance_cursor_never_moves_backwards(self, reconciler, store):
        state = LoopState(cursor="50")
        reconciler.advance_cursor(state, "40")
        assert state.cursor == "50"
        assert store.load().value is None
