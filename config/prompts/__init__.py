"""
Prompts module - templates for generated text.

Contains templates for:
- mention_reply.py: User message for mention replies
- commit_announcement.py: Status text for new commits
"""

from config.prompts.commit_announcement import COMMIT_ANNOUNCEMENT
from config.prompts.mention_reply import ENGAGEMENT_PROFILES_BLOCK, MENTION_REPLY_PROMPT

__all__ = [
    "COMMIT_ANNOUNCEMENT",
    "ENGAGEMENT_PROFILES_BLOCK",
    "MENTION_REPLY_PROMPT",
]
