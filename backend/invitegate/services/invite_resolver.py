"""Invite Resolver — redeems a code presented by any caller.

Invariants:
    - Resolution order: owners in store order, restricted codes before the open code
    - Expiry is checked before exhaustion (410 wins over 409)
    - A successful redemption increments `used` by exactly 1 and never past `limit`
    - Failed redemptions leave every counter unchanged

Design Decisions:
    - Two-step resolve: an unlocked scan finds the owner, then the code is
      re-resolved under the owner's lock before check-then-increment. A
      regenerate that lands between the two steps yields CodeNotFound.
"""

import logging
from dataclasses import dataclass

from invitegate.core.domain_types import Clock, Identity, InviteCategory, utc_now
from invitegate.core.errors import (
    CodeExhaustedError,
    CodeExpiredError,
    CodeNotFoundError,
)
from invitegate.core.repository_protocols import InviteStore
from invitegate.infrastructure.keyed_locks import KeyedLocks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Redemption:
    owner: Identity
    category: InviteCategory
    remaining: int | None = None

    def to_response(self) -> dict:
        body = {"ok": True, "owner": self.owner, "category": self.category.value}
        if self.remaining is not None:
            body["remaining"] = self.remaining
        return body


class InviteResolver:
    """Looks codes up across all bundles and enforces expiry/usage limits."""

    def __init__(self, store: InviteStore, locks: KeyedLocks, clock: Clock = utc_now):
        self.store = store
        self.locks = locks
        self.clock = clock

    async def find_owner(self, code: str) -> Identity | None:
        for owner, bundle in await self.store.items():
            if bundle.find(code) is not None:
                return owner
        return None

    async def redeem(self, code: str) -> Redemption:
        owner = await self.find_owner(code)
        if owner is None:
            raise CodeNotFoundError(code)

        async with self.locks.hold(owner):
            bundle = await self.store.get(owner)
            match = bundle.find(code) if bundle is not None else None
            if match is None:
                raise CodeNotFoundError(code)
            category, invite = match

            if invite.is_expired(self.clock()):
                raise CodeExpiredError(code)
            if invite.is_exhausted():
                raise CodeExhaustedError(code)

            invite.used += 1
            await self.store.set(owner, bundle)

        remaining = invite.remaining if category is InviteCategory.OPEN else None
        logger.info(
            f"Invite code {code} used for owner {owner} ({category.value})"
            + (f". remaining={remaining}" if remaining is not None else ""),
            extra={"identity": owner, "invite_code": code, "category": category.value},
        )
        return Redemption(owner=owner, category=category, remaining=remaining)
