"""Account Records — user, token and claim state held per identity.

Invariants:
    - UserRecord.eligible is a login-time snapshot (see core/eligibility.py)
    - ClaimRecord presence IS the "has claimed" flag; it is never updated or removed
"""

from dataclasses import asdict, dataclass
from datetime import datetime

from invitegate.core.domain_types import Identity


@dataclass
class TwitterProfile:
    """Snapshot of the provider's users/me payload taken at login."""
    id: Identity
    name: str
    username: str
    created_at: datetime
    followers: int = 0
    profile_image_url: str | None = None
    verified: bool = False

    def to_public(self) -> dict:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data


@dataclass
class OAuthTokens:
    access_token: str
    expires_in: int | None = None
    refresh_token: str | None = None


@dataclass
class UserRecord:
    profile: TwitterProfile
    tokens: OAuthTokens
    eligible: bool


@dataclass(frozen=True)
class ClaimRecord:
    when: datetime
