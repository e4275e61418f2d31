"""Shared fakes for the Twitter, LLM and GitHub clients."""

import pytest

from config.settings import Settings
from services.cursor import CursorStore
from services.errors import ActivityFeedError, CompletionAPIError, PlatformAPIError
from services.github import Commit
from services.mentions import MentionReconciler
from services.twitter import BotIdentity, Mention

BOT = BotIdentity(id="42", username="vangogh_bot")


class FakeTwitter:
    """In-memory stand-in for TwitterClient; records every call."""

    def __init__(self, mentions=None, profiles=None):
        self.mentions = list(mentions or [])
        self.profiles = list(profiles or [])
        self.fail_profiles = False
        self.fail_mentions = False
        self.fail_replies_to: set[str] = set()
        self.fail_posts_containing: set[str] = set()
        self.calls: list[tuple] = []
        self.replies: list[tuple[str, str]] = []
        self.posts: list[str] = []

    def get_me(self):
        self.calls.append(("get_me",))
        return BOT

    def get_list_member_handles(self, list_id):
        self.calls.append(("get_list_member_handles", list_id))
        if self.fail_profiles:
            raise PlatformAPIError("list members down")
        return list(self.profiles)

    def get_mentions(self, user_id, since_id=None):
        self.calls.append(("get_mentions", user_id, since_id))
        if self.fail_mentions:
            raise PlatformAPIError("timeline down")
        visible = [m for m in self.mentions if since_id is None or int(m.id) > int(since_id)]
        # Twitter returns newest first
        return sorted(visible, key=lambda m: int(m.id), reverse=True)

    async def reply(self, text, reply_to_tweet_id):
        self.calls.append(("reply", reply_to_tweet_id))
        if reply_to_tweet_id in self.fail_replies_to:
            raise PlatformAPIError(f"reply to {reply_to_tweet_id} rejected")
        self.replies.append((reply_to_tweet_id, text))
        return f"r{reply_to_tweet_id}"

    async def post(self, text):
        self.calls.append(("post", text))
        if any(marker in text for marker in self.fail_posts_containing):
            raise PlatformAPIError("duplicate status")
        self.posts.append(text)
        return f"p{len(self.posts)}"


class FakeLLM:
    """Returns canned replies; fails when the prompt contains FAIL_LLM."""

    def __init__(self, reply="Ears are overrated."):
        self.reply = reply
        self.prompts: list[tuple[str, str]] = []

    async def generate(self, system, user):
        self.prompts.append((system, user))
        if "FAIL_LLM" in user:
            raise CompletionAPIError("model overloaded")
        return self.reply


class FakeFeed:
    """GitHub feed returning fixed commits or an error."""

    username = "vangogh-ai"

    def __init__(self, commits=None, error=False):
        self.commits = list(commits or [])
        self.error = error
        self.fetches = 0

    async def fetch_commits(self):
        self.fetches += 1
        if self.error:
            raise ActivityFeedError("feed down")
        return list(self.commits)


class FailingStore(CursorStore):
    """Cursor store whose writes always fail."""

    def __init__(self):
        super().__init__("/nonexistent/dir/last_mention_id.txt")
        self.attempts: list[str] = []

    def save(self, mention_id):
        self.attempts.append(mention_id)
        return super().save(mention_id)


def mention(id_, text="@vangogh_bot hello", author="alice"):
    return Mention(id=str(id_), text=text, author=author)


@pytest.fixture
def twitter():
    return FakeTwitter()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def store(tmp_path):
    return CursorStore(tmp_path / "last_mention_id.txt")


@pytest.fixture
def reconciler(twitter, llm, store):
    return MentionReconciler(twitter, llm, store, BOT, list_id="123")


@pytest.fixture
def config(tmp_path):
    return Settings(
        _env_file=None,
        twitter_api_key="ck",
        twitter_api_secret="cs",
        twitter_access_token="at",
        twitter_access_secret="as",
        llm_api_key="sk-test",
        cursor_file=str(tmp_path / "last_mention_id.txt"),
        check_interval_seconds=91,
    )


def commit(sha, message="fix ears", repo="vangogh-ai/noear"):
    return Commit(message=message, url=f"https://github.com/{repo}/commit/{sha}")


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}
