"""Invite Schemas — request validation and response shapes for invite endpoints.

Invariants:
    - InviteUseRequest.code: 1-64 chars, passed through unchanged (matching is exact)
    - Views mirror core.invite_codes projections field for field
"""

from datetime import datetime

from pydantic import BaseModel, Field


class InviteUseRequest(BaseModel):
    """Redemption request — the code alone identifies the owner."""
    code: str = Field(min_length=1, max_length=64)


class InviteCodeView(BaseModel):
    code: str
    used: int
    limit: int
    expires_at: datetime
    valid: bool


class OpenInviteCodeView(InviteCodeView):
    remaining: int


class InvitesView(BaseModel):
    """Whole-bundle projection returned by GET /api/invites."""
    restricted: list[InviteCodeView]
    open: OpenInviteCodeView


class RedeemResponse(BaseModel):
    ok: bool = True
    owner: str
    category: str
    remaining: int | None = None
