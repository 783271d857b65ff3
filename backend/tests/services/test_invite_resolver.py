"""Invite Resolver — tests for redemption rules and per-owner serialization.

Tests cover:
    - Single-use restricted code: first redeem ok, second CodeExhausted
    - Expired code: CodeExpired, counter unchanged (expiry wins over exhaustion)
    - Open code counts down remaining and exhausts at 100
    - Unknown code: CodeNotFound
    - used never exceeds limit under interleaved concurrent redemptions
"""

import asyncio
from datetime import timedelta

import pytest

from invitegate.core.domain_types import Identity, InviteCategory
from invitegate.core.errors import (
    CodeExhaustedError,
    CodeExpiredError,
    CodeNotFoundError,
)
from invitegate.core.invite_codes import InviteBundle, InviteCode
from invitegate.infrastructure.keyed_locks import KeyedLocks
from invitegate.infrastructure.memory_store import InMemoryStore
from invitegate.services.invite_resolver import InviteResolver
from tests.services.fake_upstreams import NOW

U1 = Identity("1001")


async def test_restricted_code_single_use(registry, resolver, services):
    bundle = await registry.ensure(U1)
    c1 = bundle.restricted[0].code

    result = await resolver.redeem(c1)
    assert result.owner == U1
    assert result.category is InviteCategory.RESTRICTED
    assert result.remaining is None
    assert bundle.restricted[0].used == 1

    with pytest.raises(CodeExhaustedError):
        await resolver.redeem(c1)
    assert (await services.invites.get(U1)).restricted[0].used == 1


async def test_other_restricted_codes_unaffected(registry, resolver):
    bundle = await registry.ensure(U1)
    await resolver.redeem(bundle.restricted[0].code)
    assert [c.used for c in bundle.restricted] == [1, 0, 0]


async def test_expired_code_rejected_and_unchanged(registry, resolver, clock):
    bundle = await registry.ensure(U1)
    c2 = bundle.restricted[1].code
    clock.advance(days=7)

    with pytest.raises(CodeExpiredError) as exc_info:
        await resolver.redeem(c2)
    assert exc_info.value.http_status == 410
    assert bundle.restricted[1].used == 0


async def test_expired_takes_precedence_over_exhausted(registry, resolver, clock):
    bundle = await registry.ensure(U1)
    code = bundle.restricted[0].code
    await resolver.redeem(code)
    clock.advance(days=8)
    with pytest.raises(CodeExpiredError):
        await resolver.redeem(code)


async def test_redeem_just_before_expiry(registry, resolver, clock):
    bundle = await registry.ensure(U1)
    clock.advance(days=7, microseconds=-1)
    await resolver.redeem(bundle.open.code)
    assert bundle.open.used == 1


async def test_open_code_reports_remaining(registry, resolver):
    bundle = await registry.ensure(U1)
    first = await resolver.redeem(bundle.open.code)
    second = await resolver.redeem(bundle.open.code)
    assert first.category is InviteCategory.OPEN
    assert first.remaining == 99
    assert second.remaining == 98
    assert second.to_response() == {
        "ok": True, "owner": U1, "category": "open", "remaining": 98,
    }


async def test_open_code_exhausts_at_limit(registry, resolver):
    bundle = await registry.ensure(U1)
    for _ in range(100):
        await resolver.redeem(bundle.open.code)
    assert bundle.open.used == 100
    with pytest.raises(CodeExhaustedError):
        await resolver.redeem(bundle.open.code)
    assert bundle.open.used == 100


async def test_unknown_code_not_found(registry, resolver):
    await registry.ensure(U1)
    with pytest.raises(CodeNotFoundError) as exc_info:
        await resolver.redeem("RST-00000000")
    assert exc_info.value.http_status == 404


async def test_find_owner_scans_all_bundles(registry, resolver):
    await registry.ensure(U1)
    other = await registry.ensure(Identity("2002"))
    assert await resolver.find_owner(other.open.code) == "2002"
    assert await resolver.find_owner("nope") is None


# ─── Interleaving ────────────────────────────────────────────────

class YieldingStore(InMemoryStore):
    """Yields to the event loop on every access so redemptions interleave."""

    async def get(self, key):
        await asyncio.sleep(0)
        return await super().get(key)

    async def set(self, key, value):
        await asyncio.sleep(0)
        await super().set(key, value)

    async def items(self):
        await asyncio.sleep(0)
        return await super().items()


async def test_concurrent_redemptions_never_exceed_limit():
    store = YieldingStore()
    invite = InviteCode(code="RST-cafebabe", limit=1, expires_at=NOW + timedelta(days=7))
    await store.set(U1, InviteBundle(restricted=[invite]))
    resolver = InviteResolver(store, KeyedLocks(), clock=lambda: NOW)

    results = await asyncio.gather(
        *(resolver.redeem("RST-cafebabe") for _ in range(5)),
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 1
    assert all(isinstance(f, CodeExhaustedError) for f in failures)
    assert invite.used == 1


async def test_concurrent_open_redemptions_count_exactly():
    store = YieldingStore()
    invite = InviteCode(code="OPN-cafebabe", limit=100, expires_at=NOW + timedelta(days=7))
    await store.set(U1, InviteBundle(open=invite))
    resolver = InviteResolver(store, KeyedLocks(), clock=lambda: NOW)

    await asyncio.gather(*(resolver.redeem("OPN-cafebabe") for _ in range(30)))

    assert invite.used == 30
