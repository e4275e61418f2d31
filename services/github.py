"""
GitHub public activity feed client.

Reads the public events of one account and flattens PushEvents into
individual commits with a display URL.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from config.settings import Settings, settings as default_settings
from services.errors import ActivityFeedError

logger = logging.getLogger(__name__)

PUSH_EVENT = "PushEvent"


@dataclass(frozen=True)
class Commit:
    """A pushed commit ready to announce."""

    message: str
    url: str


def commit_url(host: str, repo_name: str, sha: str) -> str:
    """
    Build the web URL of a commit.

    repo_name comes from the event as "owner/repo", giving
    https://<host>/<owner>/<repo>/commit/<sha>.
    """
    return f"https://{host}/{repo_name}/commit/{sha}"


def extract_commits(events: list[dict[str, Any]], host: str) -> list[Commit]:
    """
    Flatten PushEvents into commits, in feed order.

    Commits without a text message or sha are skipped.

    Args:
        events: Raw event objects from the events API.
        host: Web host used in commit URLs.

    Returns:
        One Commit per pushed commit.
    """
    commits = []
    for event in events:
        if event.get("type") != PUSH_EVENT:
            continue
        repo_name = event["repo"]["name"]
        for commit in event.get("payload", {}).get("commits") or []:
            message, sha = commit.get("message"), commit.get("sha")
            if not isinstance(message, str) or not isinstance(sha, str) or not sha:
                logger.warning(f"[COMMITS] Skipping malformed commit in {repo_name}: {commit!r:.100}")
                continue
            commits.append(Commit(message=message, url=commit_url(host, repo_name, sha)))
    return commits


class GitHubFeed:
    """Async client for a GitHub account's public events."""

    def __init__(
        self,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        self.config = config or default_settings
        self.username = self.config.github_username
        self.transport = transport

    @property
    def events_url(self) -> str:
        return f"{self.config.github_api_url}/users/{self.username}/events/public"

    async def fetch_commits(self) -> list[Commit]:
        """
        Fetch pushed commits from the public feed.

        Raises:
            ActivityFeedError: On transport, status or parse failure.
        """
        try:
            async with httpx.AsyncClient(timeout=30.0, transport=self.transport) as client:
                response = await client.get(
                    self.events_url,
                    headers={"Accept": "application/vnd.github+json"}
                )
                response.raise_for_status()
                events = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ActivityFeedError(f"fetching events for {self.username} failed", e) from e

        try:
            commits = extract_commits(events, self.config.github_host)
        except (KeyError, TypeError, AttributeError) as e:
            raise ActivityFeedError("events feed returned a malformed body", e) from e

        logger.info(f"Found {len(commits)} commits in {len(events)} events")
        return commits
