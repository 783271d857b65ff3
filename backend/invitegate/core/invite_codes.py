"""Invite Codes — bundle construction, validity rules and read-only projections.

Invariants:
    - used <= limit for every code at every observable point
    - A code is valid iff now < expires_at AND used < limit
    - A bundle holds exactly RESTRICTED_CODE_COUNT restricted codes and one open code
    - Fresh codes always start at used=0 with expires_at = now + INVITE_TTL

Design Decisions:
    - Mutable dataclasses: the registry mutates counters in place and writes back
      through the store, so a persistent store sees every change
    - Uniqueness relies on 32 bits of randomness (secrets.token_hex(4)); there is
      no collision check against existing codes
"""

import secrets
from dataclasses import dataclass, field
from datetime import datetime

from invitegate.core.domain_types import (
    CODE_PREFIXES,
    INVITE_TTL,
    OPEN_CODE_LIMIT,
    RESTRICTED_CODE_COUNT,
    RESTRICTED_CODE_LIMIT,
    InviteCategory,
)
from invitegate.core.errors import InvalidCategoryError


@dataclass
class InviteCode:
    """One redeemable code with its usage counter and expiry."""
    code: str
    limit: int
    expires_at: datetime
    used: int = 0

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_exhausted(self) -> bool:
        return self.used >= self.limit

    def is_valid(self, now: datetime) -> bool:
        return not self.is_expired(now) and not self.is_exhausted()

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)


@dataclass
class InviteBundle:
    """All codes owned by one identity."""
    restricted: list[InviteCode] = field(default_factory=list)
    open: InviteCode | None = None

    def codes(self) -> list[tuple[InviteCategory, InviteCode]]:
        """Restricted codes first, then the open code (resolution order)."""
        pairs = [(InviteCategory.RESTRICTED, c) for c in self.restricted]
        if self.open is not None:
            pairs.append((InviteCategory.OPEN, self.open))
        return pairs

    def find(self, code: str) -> tuple[InviteCategory, InviteCode] | None:
        for category, invite in self.codes():
            if invite.code == code:
                return category, invite
        return None


def parse_category(value: str | InviteCategory) -> InviteCategory:
    """Map a raw category string to InviteCategory or raise InvalidCategoryError."""
    if isinstance(value, InviteCategory):
        return value
    try:
        return InviteCategory(value)
    except ValueError:
        raise InvalidCategoryError(str(value))


def generate_code(category: InviteCategory) -> str:
    return CODE_PREFIXES[category] + secrets.token_hex(4)


def new_restricted_codes(now: datetime) -> list[InviteCode]:
    return [
        InviteCode(
            code=generate_code(InviteCategory.RESTRICTED),
            limit=RESTRICTED_CODE_LIMIT,
            expires_at=now + INVITE_TTL,
        )
        for _ in range(RESTRICTED_CODE_COUNT)
    ]


def new_open_code(now: datetime) -> InviteCode:
    return InviteCode(
        code=generate_code(InviteCategory.OPEN),
        limit=OPEN_CODE_LIMIT,
        expires_at=now + INVITE_TTL,
    )


def new_bundle(now: datetime) -> InviteBundle:
    return InviteBundle(
        restricted=new_restricted_codes(now), open=new_open_code(now),
    )


def regenerate_category(
    bundle: InviteBundle, category: InviteCategory, now: datetime,
) -> InviteBundle:
    """Replace one category's codes in place. Old codes become unresolvable."""
    if category is InviteCategory.RESTRICTED:
        bundle.restricted = new_restricted_codes(now)
    else:
        bundle.open = new_open_code(now)
    return bundle


# ─── Projections ─────────────────────────────────────────────────

def code_view(invite: InviteCode, now: datetime) -> dict:
    return {
        "code": invite.code,
        "used": invite.used,
        "limit": invite.limit,
        "expires_at": invite.expires_at,
        "valid": invite.is_valid(now),
    }


def open_code_view(invite: InviteCode, now: datetime) -> dict:
    view = code_view(invite, now)
    view["remaining"] = invite.remaining
    return view


def category_view(
    bundle: InviteBundle, category: InviteCategory, now: datetime,
) -> list[dict] | dict:
    """Projection of one category: a list for restricted, a single dict for open."""
    if category is InviteCategory.RESTRICTED:
        return [code_view(c, now) for c in bundle.restricted]
    return open_code_view(bundle.open, now)


def bundle_view(bundle: InviteBundle, now: datetime) -> dict:
    """Read-only projection of a whole bundle, keyed by category value."""
    return {
        category.value: category_view(bundle, category, now)
        for category in InviteCategory
    }
