"""Claim Tracker — one-time claim gated by the login-time eligibility snapshot.

Invariants:
    - claim() succeeds at most once per identity
    - No stored record → NotEligible; an existing claim → AlreadyClaimed whatever
      the current eligibility snapshot says; otherwise ineligible → NotEligible
    - A failed claim has no side effects: no ClaimRecord, no bundle reset
    - On success the ClaimRecord and a full bundle replacement happen under one lock
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from invitegate.core.accounts import ClaimRecord
from invitegate.core.domain_types import Clock, Identity, utc_now
from invitegate.core.errors import AlreadyClaimedError, NotEligibleError
from invitegate.core.repository_protocols import ClaimStore, UserStore
from invitegate.infrastructure.keyed_locks import KeyedLocks
from invitegate.services.invite_registry import InviteRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClaimConfirmation:
    identity: Identity
    when: datetime

    def to_response(self) -> dict:
        return {
            "success": True,
            "when": self.when.isoformat(),
            "card": {
                "id": f"demo-card-{self.identity}",
                "title": "Demo Reward Card",
                "message": "Congrats! You claimed a demo reward.",
            },
        }


class ClaimTracker:
    """Records claims and resets the claimer's invite bundle."""

    def __init__(
        self,
        users: UserStore,
        claims: ClaimStore,
        registry: InviteRegistry,
        locks: KeyedLocks,
        clock: Clock = utc_now,
    ):
        self.users = users
        self.claims = claims
        self.registry = registry
        self.locks = locks
        self.clock = clock

    async def claimed(self, identity: Identity) -> ClaimRecord | None:
        return await self.claims.get(identity)

    async def claim(self, identity: Identity) -> ClaimConfirmation:
        async with self.locks.hold(identity):
            record = await self.users.get(identity)
            if record is None:
                raise NotEligibleError(identity)
            if await self.claims.get(identity) is not None:
                raise AlreadyClaimedError(identity)
            if not record.eligible:
                raise NotEligibleError(identity)

            when = self.clock()
            await self.claims.set(identity, ClaimRecord(when=when))
            await self.registry.replace_bundle_unlocked(identity)

        logger.info(
            f"User {identity} claimed demo at {when.isoformat()}, invites created.",
            extra={"identity": identity},
        )
        return ClaimConfirmation(identity=identity, when=when)
