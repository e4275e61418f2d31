"""
Twitter Authorization Server - obtain access tokens for the bot account.

Small FastAPI application served on 127.0.0.1 that walks the operator through
three-legged OAuth1:
    GET /          start authorization, opens the browser
    GET /callback  Twitter redirects here with oauth_token and oauth_verifier

The resulting access token/secret are printed to the console only.
"""

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from config.settings import settings
from services.auth_exchange import AuthorizationExchange
from services.errors import BotError, InitializationError, InvalidCallback, TokenExchangeError
from utils.logs import configure_logging

logger = logging.getLogger(__name__)


def create_app(exchange: AuthorizationExchange) -> FastAPI:
    """Build the two-route authorization app around one exchange."""
    app = FastAPI(
        title="Twitter Authorization",
        description="Three-legged OAuth1 helper for the bot account",
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )

    @app.get("/", response_class=PlainTextResponse)
    def start_authorization():
        """Request a token and open the authorize page."""
        try:
            exchange.start_authorization()
        except BotError as e:
            logger.error(f"[AUTH] Error starting authentication: {e}")
            return PlainTextResponse("Error starting authentication process", status_code=500)
        return "Authentication started. Check your browser."

    @app.get("/callback", response_class=PlainTextResponse)
    def oauth_callback(oauth_token: str | None = None, oauth_verifier: str | None = None):
        """OAuth callback endpoint for Twitter authentication."""
        try:
            exchange.handle_callback(oauth_token, oauth_verifier)
        except InvalidCallback as e:
            logger.error(f"[AUTH] Invalid callback: {e}")
            return PlainTextResponse(
                "Invalid callback. Restart authentication from the start page.",
                status_code=400
            )
        except TokenExchangeError as e:
            logger.error(f"[AUTH] Error in callback: {e}")
            return PlainTextResponse("Error completing authentication", status_code=502)
        return "Authentication successful! Check your terminal for the access tokens."

    return app


def main() -> None:
    """Start the authorization server."""
    # Console only: the access tokens are logged
    configure_logging()

    try:
        exchange = AuthorizationExchange(settings)
    except InitializationError as e:
        logger.error(f"[AUTH] {e}")
        sys.exit(1)

    logger.info("Starting authentication process...")
    logger.info(f"1. Open http://{settings.auth_host}:{settings.auth_port}/ - a browser window will open.")
    logger.info("2. Log in with your bot account (not your developer account).")
    logger.info("3. Authorize the application.")
    logger.info("4. Copy the new access tokens to your .env file.")

    # uvicorn handles SIGINT; the session lives in memory only
    uvicorn.run(create_app(exchange), host=settings.auth_host, port=settings.auth_port)
    logger.info("Server shutting down...")


if __name__ == "__main__":
    main()
