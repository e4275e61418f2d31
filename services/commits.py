"""
Commit announcement service.

Posts a status for every pushed commit in the GitHub activity feed. Commits
announced successfully are remembered in the loop state and skipped on later
iterations; failed posts are retried on the next one.
"""

import logging

from config.prompts.commit_announcement import COMMIT_ANNOUNCEMENT
from services.errors import BotError
from services.github import Commit, GitHubFeed
from services.mentions import LoopState
from services.twitter import TwitterClient, shorten_to_fit

logger = logging.getLogger(__name__)


def format_announcement(username: str, commit: Commit) -> str:
    """Status text for one commit; only the message is shortened, never the URL."""
    return shorten_to_fit(
        commit.message,
        lambda message: COMMIT_ANNOUNCEMENT.format(username=username, message=message, url=commit.url)
    )


class CommitAnnouncer:
    """Announces new commits from one GitHub account."""

    def __init__(self, twitter: TwitterClient, feed: GitHubFeed):
        self.twitter = twitter
        self.feed = feed

    async def announce(self, state: LoopState) -> dict:
        """
        Fetch the feed and post one status per unannounced commit.

        Args:
            state: Loop state holding already announced commit URLs.

        Returns:
            Summary of what happened.
        """
        try:
            commits = await self.feed.fetch_commits()
        except BotError as e:
            logger.error(f"[COMMITS] Feed fetch FAILED: {e}")
            return {"success": False, "error": str(e), "posted": 0}

        pending = [c for c in commits if c.url not in state.announced_commits]
        if not pending:
            logger.info("[COMMITS] No new commits")
            return {"success": True, "found": len(commits), "posted": 0}

        posted = 0
        for commit in pending:
            try:
                await self.twitter.post(format_announcement(self.feed.username, commit))
            except BotError as e:
                logger.error(f"[COMMITS] Announcing {commit.url} FAILED: {e}")
                continue
            state.announced_commits.add(commit.url)
            posted += 1
            logger.info(f'[COMMITS] Tweeted commit: "{commit.message}"')

        return {"success": True, "found": len(commits), "posted": posted}
