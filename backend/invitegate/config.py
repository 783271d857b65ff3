"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded beyond dev defaults)
    - get_settings() is cached (lru_cache) — single instance per process
    - redirect_uri is always {public_base_url}/callback

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box locally
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    public_base_url: str | None = None

    @field_validator("public_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            return v or None
        return v

    # Twitter OAuth2 (authorization code + PKCE)
    client_id: str | None = None
    client_secret: str = ""
    twitter_authorize_url: str = "https://twitter.com/i/oauth2/authorize"
    twitter_token_url: str = "https://api.twitter.com/2/oauth2/token"
    twitter_api_base_url: str = "https://api.twitter.com/2"
    twitter_scopes: list[str] = ["tweet.read", "users.read", "offline.access"]

    # Sessions
    session_secret: str = "dev-secret-change-me"
    session_max_age_seconds: int = 7 * 24 * 3600

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Loyalty leaderboard (GraphQL)
    leaderboard_endpoint: str = "https://graphigo-business.prd.galaxy.eco/query"
    leaderboard_access_token: str | None = None

    # API
    cors_origins: list[str] = ["http://127.0.0.1:3000", "http://localhost:3000"]
    static_dir: str = "public"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def base_url(self) -> str:
        return self.public_base_url or f"http://{self.host}:{self.port}"

    @property
    def redirect_uri(self) -> str:
        return f"{self.base_url}/callback"


@lru_cache
def get_settings() -> Settings:
    return Settings()
