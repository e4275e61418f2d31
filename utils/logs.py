"""
Logging setup shared by main.py and auth.py.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty third-party loggers
QUIET_LOGGERS = ("tweepy", "httpx", "httpcore", "urllib3", "requests_oauthlib", "oauthlib")


def configure_logging(log_file: str | None = None, level: int = logging.INFO) -> None:
    """
    Configure root logging to console and, optionally, a file.

    Args:
        log_file: Path of the log file. None logs to console only.
        level: Root log level.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
