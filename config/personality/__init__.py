"""
Personality module - Combines all personality parts into SYSTEM_PROMPT.
"""

from config.personality.backstory import BACKSTORY
from config.personality.goals import GOALS
from config.personality.never_say import NEVER_SAY

# Combine all parts into the final system prompt
SYSTEM_PROMPT = f"""{BACKSTORY}
{GOALS}
{NEVER_SAY}
"""

__all__ = ["SYSTEM_PROMPT", "BACKSTORY", "GOALS", "NEVER_SAY"]
