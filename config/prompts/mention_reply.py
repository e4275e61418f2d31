"""
Mention Reply Prompt - User message for replying to a mention.

Used by MentionReconciler. The system message is SYSTEM_PROMPT from
config.personality.
"""

MENTION_REPLY_PROMPT = """Reply to this tweet: {text}
{profiles_block}
Reply rules:
- Under 280 characters
- Respond to THEIR message, stay in character
- Just the reply text, nothing else"""

ENGAGEMENT_PROFILES_BLOCK = """
Profiles you engage with: {profiles}
"""
