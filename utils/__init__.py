"""
Utility modules for the VanGogh bot.

Contains shared functionality used across services and entry points.
"""

from utils.api import get_llm_headers
from utils.logs import configure_logging

__all__ = ["get_llm_headers", "configure_logging"]
