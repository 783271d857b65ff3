"""Invite Registry — owns the Identity → InviteBundle mapping.

Invariants:
    - ensure() never replaces an existing bundle
    - regenerate() replaces exactly one category; replace_bundle() replaces both
    - Every mutation runs under the owner's lock and is written back with set()
    - Replaced codes are dropped, not revoked: they simply stop resolving

Design Decisions:
    - Clock injected: tests pin "now" without monkeypatching datetime
    - view_of() ensures first, so a freshly connected user always sees codes
"""

import logging

from invitegate.core.domain_types import Clock, Identity, InviteCategory, utc_now
from invitegate.core.invite_codes import (
    InviteBundle,
    bundle_view,
    category_view,
    new_bundle,
    parse_category,
    regenerate_category,
)
from invitegate.core.repository_protocols import InviteStore
from invitegate.infrastructure.keyed_locks import KeyedLocks

logger = logging.getLogger(__name__)


class InviteRegistry:
    """Creates, regenerates and projects invite bundles."""

    def __init__(self, store: InviteStore, locks: KeyedLocks, clock: Clock = utc_now):
        self.store = store
        self.locks = locks
        self.clock = clock

    async def ensure(self, identity: Identity) -> InviteBundle:
        """Return the identity's bundle, creating it on first access."""
        async with self.locks.hold(identity):
            return await self._ensure_unlocked(identity)

    async def _ensure_unlocked(self, identity: Identity) -> InviteBundle:
        bundle = await self.store.get(identity)
        if bundle is None:
            bundle = new_bundle(self.clock())
            await self.store.set(identity, bundle)
            logger.info("Invite bundle created", extra={"identity": identity})
        return bundle

    async def regenerate(
        self, identity: Identity, category: str | InviteCategory,
    ) -> InviteBundle:
        """Replace one category with fresh codes (usage 0, expiry now + 7 days)."""
        parsed = parse_category(category)
        async with self.locks.hold(identity):
            bundle = await self._ensure_unlocked(identity)
            regenerate_category(bundle, parsed, self.clock())
            await self.store.set(identity, bundle)
        logger.info(
            f"Invites regenerated for {identity} type={parsed.value}",
            extra={"identity": identity, "category": parsed.value},
        )
        return bundle

    async def replace_bundle_unlocked(self, identity: Identity) -> InviteBundle:
        """Full bundle replacement. Caller must already hold the identity's lock."""
        bundle = new_bundle(self.clock())
        await self.store.set(identity, bundle)
        return bundle

    async def replace_bundle(self, identity: Identity) -> InviteBundle:
        async with self.locks.hold(identity):
            return await self.replace_bundle_unlocked(identity)

    async def view_of(self, identity: Identity) -> dict:
        """Read-only projection of every code with validity (and remaining for open)."""
        bundle = await self.ensure(identity)
        return bundle_view(bundle, self.clock())

    async def category_view_of(
        self, identity: Identity, category: str | InviteCategory,
    ) -> list[dict] | dict:
        parsed = parse_category(category)
        bundle = await self.ensure(identity)
        return category_view(bundle, parsed, self.clock())
