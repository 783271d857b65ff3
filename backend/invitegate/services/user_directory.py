"""User Directory — records logins and serves stored user records.

Invariants:
    - Every login overwrites the identity's UserRecord and recomputes eligibility
    - Every login ensures (never regenerates) the identity's invite bundle
"""

import logging

from invitegate.core.accounts import OAuthTokens, TwitterProfile, UserRecord
from invitegate.core.domain_types import Clock, Identity, utc_now
from invitegate.core.eligibility import compute_eligibility
from invitegate.core.repository_protocols import UserStore
from invitegate.services.invite_registry import InviteRegistry

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(
        self, users: UserStore, registry: InviteRegistry, clock: Clock = utc_now,
    ):
        self.users = users
        self.registry = registry
        self.clock = clock

    async def get(self, identity: Identity) -> UserRecord | None:
        return await self.users.get(identity)

    async def record_login(
        self, profile: TwitterProfile, tokens: OAuthTokens,
    ) -> UserRecord:
        """Snapshot eligibility, store the record and make sure invites exist."""
        eligible = compute_eligibility(
            profile.created_at, profile.followers, self.clock(),
        )
        record = UserRecord(profile=profile, tokens=tokens, eligible=eligible)
        await self.users.set(profile.id, record)
        await self.registry.ensure(profile.id)
        logger.info(
            f"User @{profile.username} logged in (eligible={eligible})",
            extra={"identity": profile.id},
        )
        return record
