"""
Twitter client using tweepy for Twitter API v2.

Handles identity lookup, list members, mention timeline, posting tweets
and replies. Every tweepy or transport failure is raised as PlatformAPIError.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable

import requests
import tweepy
from twitter_text import parse_tweet

from config.settings import Settings, settings as default_settings
from services.errors import InitializationError, PlatformAPIError

logger = logging.getLogger(__name__)

# Twitter caps max_results for the mention timeline at 100
MENTIONS_PAGE_SIZE = 100
LIST_MEMBERS_PAGE_SIZE = 100

_API_ERRORS = (tweepy.TweepyException, requests.exceptions.RequestException)

ELLIPSIS = "..."


def fits_tweet(text: str) -> bool:
    """True if text is within Twitter's weighted length limit (emoji/CJK count double)."""
    return parse_tweet(text).valid


def shorten_to_fit(part: str, render: Callable[[str], str] = lambda s: s) -> str:
    """
    Render part, cutting it down until the result fits in one tweet.

    Args:
        part: The text that may be shortened.
        render: Builds the final tweet around part.

    Returns:
        render(part) if it fits, else render(longest prefix + "...").
    """
    if fits_tweet(render(part)):
        return render(part)

    # Longest prefix that still fits, by binary search on length
    low, high = 0, len(part)
    while low < high:
        middle = (low + high + 1) // 2
        if fits_tweet(render(part[:middle].rstrip() + ELLIPSIS)):
            low = middle
        else:
            high = middle - 1
    return render(part[:low].rstrip() + ELLIPSIS)


class TimeoutSession(requests.Session):
    """requests session that applies a default timeout to every call."""

    def __init__(self, timeout: float, base: requests.Session | None = None):
        super().__init__()
        self.timeout = timeout
        if base is not None:
            self.headers.update(base.headers)

    def request(self, *args, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(*args, **kwargs)


@dataclass(frozen=True)
class BotIdentity:
    """Authenticated account, resolved once at startup."""

    id: str
    username: str


@dataclass(frozen=True)
class Mention:
    """A tweet mentioning the bot."""

    id: str
    text: str
    created_at: str | None = None
    author: str | None = None

    @property
    def sort_key(self) -> int:
        return int(self.id)


def require_account_credentials(config: Settings) -> None:
    """Raise InitializationError unless all four OAuth1 credentials are set."""
    missing = [
        name for name in (
            "twitter_api_key",
            "twitter_api_secret",
            "twitter_access_token",
            "twitter_access_secret",
        )
        if not getattr(config, name)
    ]
    if missing:
        raise InitializationError(
            f"Missing Twitter credentials: {', '.join(name.upper() for name in missing)}"
        )


class TwitterClient:
    """Twitter API v2 client using tweepy."""

    def __init__(self, config: Settings | None = None, client: tweepy.Client | None = None):
        """
        Initialize Twitter client with credentials from settings.

        Args:
            config: Settings to read credentials from.
            client: Pre-built tweepy client (tests).

        Raises:
            InitializationError: If credentials are missing or tweepy rejects them.
        """
        if client is not None:
            self.client = client
            return

        config = config or default_settings
        require_account_credentials(config)

        try:
            self.client = tweepy.Client(
                bearer_token=config.twitter_bearer_token,
                consumer_key=config.twitter_api_key,
                consumer_secret=config.twitter_api_secret,
                access_token=config.twitter_access_token,
                access_token_secret=config.twitter_access_secret,
                wait_on_rate_limit=False
            )
            self.client.session = TimeoutSession(config.twitter_timeout_seconds, self.client.session)
        except (TypeError, ValueError, tweepy.TweepyException) as e:
            raise InitializationError("Failed to create Twitter client", e) from e

    def get_me(self) -> BotIdentity:
        """
        Get authenticated user info.

        Returns:
            BotIdentity with id and username.
        """
        try:
            response = self.client.get_me(user_auth=True)
            return BotIdentity(id=str(response.data.id), username=response.data.username)
        except _API_ERRORS as e:
            logger.error(f"Error getting user info: {e}")
            raise PlatformAPIError("get_me failed", e) from e
        except (AttributeError, TypeError) as e:
            raise PlatformAPIError("get_me returned a malformed body", e) from e

    def get_list_member_handles(self, list_id: str) -> list[str]:
        """
        Get usernames of the members of a Twitter list.

        Args:
            list_id: Numeric list ID.

        Returns:
            List of handles (without @).
        """
        try:
            response = self.client.get_list_members(
                id=list_id,
                max_results=LIST_MEMBERS_PAGE_SIZE,
                user_auth=True
            )
        except _API_ERRORS as e:
            raise PlatformAPIError(f"get_list_members({list_id}) failed", e) from e

        try:
            return [member.username for member in (response.data or [])]
        except AttributeError as e:
            raise PlatformAPIError("get_list_members returned a malformed body", e) from e

    def get_mentions(self, user_id: str, since_id: str | None = None) -> list[Mention]:
        """
        Get mentions of a user newer than since_id.

        Follows next_token until the timeline is exhausted, so the oldest
        unseen mention is never skipped.

        Args:
            user_id: Account whose mention timeline to read.
            since_id: Only get mentions newer than this tweet ID. None fetches
                everything currently visible.

        Returns:
            Mentions sorted by ascending ID.
        """
        params: dict[str, Any] = {
            "id": user_id,
            "max_results": MENTIONS_PAGE_SIZE,
            "expansions": ["author_id"],
            "tweet_fields": ["created_at", "author_id"],
            "user_fields": ["username"],
            "user_auth": True,
        }
        if since_id:
            params["since_id"] = since_id

        mentions: dict[str, Mention] = {}
        pagination_token = None
        pages = 0
        while True:
            if pagination_token:
                params["pagination_token"] = pagination_token

            try:
                response = self.client.get_users_mentions(**params)
            except _API_ERRORS as e:
                raise PlatformAPIError("get_users_mentions failed", e) from e
            pages += 1

            try:
                for mention in self._parse_mentions(response):
                    mentions[mention.id] = mention
                pagination_token = (getattr(response, "meta", None) or {}).get("next_token")
            except (AttributeError, TypeError) as e:
                raise PlatformAPIError("get_users_mentions returned a malformed body", e) from e

            if not pagination_token:
                break

        if not mentions:
            logger.info("No new mentions found")
            return []

        result = sorted(mentions.values(), key=lambda m: m.sort_key)
        logger.info(f"Found {len(result)} new mentions in {pages} page(s)")
        return result

    @staticmethod
    def _parse_mentions(response) -> list[Mention]:
        """Turn one timeline page into Mentions."""
        if not response.data:
            return []

        # Build user lookup from includes
        users = {}
        if response.includes and "users" in response.includes:
            for user in response.includes["users"]:
                users[user.id] = user.username

        return [
            Mention(
                id=str(tweet.id),
                text=tweet.text,
                created_at=tweet.created_at.isoformat() if tweet.created_at else None,
                author=users.get(tweet.author_id)
            )
            for tweet in response.data
        ]

    async def post(self, text: str) -> str:
        """
        Post a new tweet.

        Args:
            text: Tweet text content.

        Returns:
            ID of the created tweet.
        """
        try:
            response = self.client.create_tweet(text=text, user_auth=True)
            tweet_id = str(response.data["id"])
        except _API_ERRORS as e:
            raise PlatformAPIError("create_tweet failed", e) from e
        except (KeyError, TypeError) as e:
            raise PlatformAPIError("create_tweet returned a malformed body", e) from e

        logger.info(f"Posted tweet {tweet_id}: {text[:50]}...")
        return tweet_id

    async def reply(self, text: str, reply_to_tweet_id: str) -> str:
        """
        Reply to a tweet.

        Args:
            text: Reply text content.
            reply_to_tweet_id: ID of tweet to reply to.

        Returns:
            ID of the reply tweet.
        """
        try:
            response = self.client.create_tweet(
                text=text,
                in_reply_to_tweet_id=reply_to_tweet_id,
                user_auth=True
            )
            tweet_id = str(response.data["id"])
        except _API_ERRORS as e:
            raise PlatformAPIError(f"reply to {reply_to_tweet_id} failed", e) from e
        except (KeyError, TypeError) as e:
            raise PlatformAPIError("create_tweet returned a malformed body", e) from e

        logger.info(f"Replied with tweet {tweet_id} to {reply_to_tweet_id}")
        return tweet_id
