"""
Model configuration for the VanGogh bot.

Centralized model definitions used across all services.
Change models here to update them everywhere.
"""

# LLM Models (for text generation)
LLM_MODEL = "gpt-4"

# Uncomment to override defaults:
# LLM_MAX_TOKENS = 300
# LLM_TEMPERATURE = 0.9
