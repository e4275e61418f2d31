"""
Chat completion API configuration.

Centralized helper for the headers sent to the OpenAI-compatible
completion endpoint. Used by services.llm.
"""

from config.settings import Settings


def get_llm_headers(config: Settings) -> dict:
    """
    Get headers for completion API requests.

    Returns:
        dict: Headers including authorization and content type.
    """
    return {
        "Authorization": f"Bearer {config.llm_api_key}",
        "Content-Type": "application/json",
    }
