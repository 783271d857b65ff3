"""Twitter Schemas — validation of OAuth2 token and users/me payloads.

Invariants:
    - Missing public_metrics means 0 followers
    - Missing created_at is left as None here; the caller decides the fallback
    - Unknown fields from the provider are ignored
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(BaseModel):
    """POST /2/oauth2/token response body."""
    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    scope: str | None = None


class PublicMetrics(BaseModel):
    model_config = ConfigDict(extra="ignore")

    followers_count: int = 0
    following_count: int = 0
    tweet_count: int = 0


class TwitterUser(BaseModel):
    """The `data` object of GET /2/users/me."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    username: str
    profile_image_url: str | None = None
    created_at: datetime | None = None
    verified: bool | None = None
    public_metrics: PublicMetrics | None = None

    @property
    def followers(self) -> int:
        return self.public_metrics.followers_count if self.public_metrics else 0


class UsersMeResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: TwitterUser | None = None
    errors: list[dict] = Field(default_factory=list)
