"""
Three-legged OAuth1 exchange for the bot account.

Turns the app's consumer key/secret into account access token/secret:
1. start_authorization: get a request token, open the authorize URL
2. handle_callback: exchange the verifier for access credentials

The access credentials are only emitted to the operator, never written to
disk; the operator copies them into .env.
"""

import logging
import threading
import webbrowser
from dataclasses import dataclass
from typing import Callable

import requests
import tweepy

from config.settings import Settings
from services.errors import (
    InitializationError,
    InvalidCallback,
    PlatformAPIError,
    TokenExchangeError,
)

logger = logging.getLogger(__name__)

_API_ERRORS = (tweepy.TweepyException, requests.exceptions.RequestException)


@dataclass(frozen=True)
class RequestTokenSession:
    """Request token issued for one authorization attempt."""

    token: str
    secret: str


@dataclass(frozen=True)
class AccessCredentials:
    """Long-lived account credentials."""

    access_token: str
    access_secret: str

    def as_env(self) -> str:
        return f"TWITTER_ACCESS_TOKEN={self.access_token}\nTWITTER_ACCESS_SECRET={self.access_secret}"


class SessionSlot:
    """
    Holds at most one active request-token session.

    A new session replaces the old one (last writer wins). Taking a session
    checks the token and removes it in one step.
    """

    def __init__(self):
        self._session: RequestTokenSession | None = None
        self._lock = threading.Lock()

    @property
    def active(self) -> RequestTokenSession | None:
        with self._lock:
            return self._session

    def put(self, session: RequestTokenSession) -> RequestTokenSession | None:
        """Store session, returning the one it replaced."""
        with self._lock:
            replaced, self._session = self._session, session
            return replaced

    def take(self, token: str | None, verifier: str | None) -> RequestTokenSession:
        """
        Remove and return the active session if token matches.

        Raises:
            InvalidCallback: No active session, token mismatch or no verifier.
                The active session is left in place.
        """
        with self._lock:
            if not token or not verifier:
                raise InvalidCallback("callback is missing oauth_token or oauth_verifier")
            if self._session is None:
                raise InvalidCallback("no authorization in progress")
            if token != self._session.token:
                raise InvalidCallback("oauth_token does not match the active authorization")
            session, self._session = self._session, None
            return session


def require_consumer_credentials(config: Settings) -> None:
    """Raise InitializationError unless the consumer key/secret are set."""
    if not config.twitter_api_key or not config.twitter_api_secret:
        raise InitializationError("Missing TWITTER_API_KEY or TWITTER_API_SECRET")


class AuthorizationExchange:
    """Drives the request token -> authorize -> access token handshake."""

    def __init__(
        self,
        config: Settings,
        handler_factory: Callable[..., tweepy.OAuth1UserHandler] = tweepy.OAuth1UserHandler,
        open_browser: Callable[[str], bool] = webbrowser.open
    ):
        require_consumer_credentials(config)
        self.consumer_key = config.twitter_api_key
        self.consumer_secret = config.twitter_api_secret
        self.callback_url = config.callback_url
        self.handler_factory = handler_factory
        self.open_browser = open_browser
        self.slot = SessionSlot()

    def _handler(self) -> tweepy.OAuth1UserHandler:
        return self.handler_factory(
            self.consumer_key,
            self.consumer_secret,
            callback=self.callback_url
        )

    def start_authorization(self) -> str:
        """
        Begin an authorization attempt.

        Returns:
            The authorize URL opened for the operator.

        Raises:
            PlatformAPIError: If Twitter refuses the request token.
        """
        handler = self._handler()
        try:
            url = handler.get_authorization_url(signin_with_twitter=False)
            session = RequestTokenSession(
                token=handler.request_token["oauth_token"],
                secret=handler.request_token["oauth_token_secret"]
            )
        except _API_ERRORS as e:
            raise PlatformAPIError("request token failed", e) from e
        except (KeyError, TypeError) as e:
            raise PlatformAPIError("request token response was malformed", e) from e

        if self.slot.put(session) is not None:
            logger.info("[AUTH] Replaced previous authorization attempt")

        try:
            opened = self.open_browser(url)
        except webbrowser.Error as e:
            logger.warning(f"[AUTH] Could not launch browser: {e}")
            opened = False

        if not opened:
            logger.info(f"[AUTH] Please open this URL manually: {url}")
        else:
            logger.info("[AUTH] Authorization page opened in browser")

        return url

    def handle_callback(self, token: str | None, verifier: str | None) -> AccessCredentials:
        """
        Finish the attempt started by start_authorization.

        The session is single-use: it is discarded whether or not the exchange
        succeeds.

        Raises:
            InvalidCallback: Token does not match the active session, or no verifier.
            TokenExchangeError: Twitter rejected the verifier.
        """
        session = self.slot.take(token, verifier)

        handler = self._handler()
        handler.request_token = {
            "oauth_token": session.token,
            "oauth_token_secret": session.secret
        }
        try:
            access_token, access_secret = handler.get_access_token(verifier)
        except _API_ERRORS as e:
            raise TokenExchangeError("verifier exchange rejected", e) from e

        credentials = AccessCredentials(access_token=access_token, access_secret=access_secret)
        logger.info("[AUTH] === Save these tokens in your .env file ===")
        for line in credentials.as_env().splitlines():
            logger.info(f"[AUTH] {line}")
        return credentials
