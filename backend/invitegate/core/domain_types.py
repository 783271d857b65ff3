"""Domain Types — rich types and constants shared across the codebase.

Invariants:
    - Identity wraps the provider's user id — never use a bare str in domain logic
    - InviteCategory is the only way to name a bundle slot (no raw string matching)
    - Bundle shape and lifetimes are single-sourced here

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, NewType


# ─── Identity Types ──────────────────────────────────────────────

Identity = NewType("Identity", str)


# ─── Enums ───────────────────────────────────────────────────────

class InviteCategory(str, Enum):
    """Invite bundle slots — restricted codes are single-use, the open code is shared."""
    RESTRICTED = "restricted"
    OPEN = "open"


# ─── Bundle Shape ────────────────────────────────────────────────

RESTRICTED_CODE_COUNT: int = 3
RESTRICTED_CODE_LIMIT: int = 1
OPEN_CODE_LIMIT: int = 100
INVITE_TTL: timedelta = timedelta(days=7)

CODE_PREFIXES: dict[InviteCategory, str] = {
    InviteCategory.RESTRICTED: "RST-",
    InviteCategory.OPEN: "OPN-",
}


# ─── Eligibility Snapshot ────────────────────────────────────────

MIN_ACCOUNT_AGE_DAYS: int = 30
MIN_FOLLOWERS_EXCLUSIVE: int = 100


# ─── Time ────────────────────────────────────────────────────────

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
