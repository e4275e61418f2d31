"""
Application settings using Pydantic Settings.

Loads configuration from environment variables and .env file.
Credentials default to empty strings so the settings object can always be
built; entry points validate them with require_* before creating clients.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Twitter app credentials (consumer key/secret)
    twitter_api_key: str = ""
    twitter_api_secret: str = ""

    # Twitter account credentials (produced by auth.py)
    twitter_access_token: str = ""
    twitter_access_secret: str = ""
    twitter_bearer_token: str | None = None
    twitter_timeout_seconds: float = 30.0

    # Chat completion API (OpenAI-compatible)
    llm_api_key: str = ""
    llm_url: str = "https://api.openai.com/v1/chat/completions"

    # Mention loop
    check_interval_seconds: int = 91
    cursor_file: str = "last_mention_id.txt"
    engagement_list_id: str = "1864297489920045098"
    log_file: str = "twitter_bot.log"

    # Commit announcements
    github_username: str = "vangogh-ai"
    github_api_url: str = "https://api.github.com"
    github_host: str = "github.com"

    # Authorization server
    auth_host: str = "127.0.0.1"
    auth_port: int = 8000

    @property
    def callback_url(self) -> str:
        """OAuth callback registered with the Twitter app."""
        return f"http://{self.auth_host}:{self.auth_port}/callback"


# Global settings instance
settings = Settings()
