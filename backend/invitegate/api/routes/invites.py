"""Invite Routes — view, regenerate and redeem invite codes.

Invariants:
    - View and regenerate act on the session identity's own bundle
    - Redemption needs no session: the code alone resolves the owner
    - Unknown categories fail with INVALID_CATEGORY (400), not a 422

Design Decisions:
    - category path parameter typed as str so the domain error, not FastAPI's
      enum validation, decides the response
"""

from fastapi import APIRouter

from invitegate.api.dependencies import ContainerDep, IdentityDep
from invitegate.schemas.invites import InvitesView, InviteUseRequest, RedeemResponse

router = APIRouter(prefix="/api/invites", tags=["invites"])


@router.get("", response_model=InvitesView)
async def list_invites(identity: IdentityDep, services: ContainerDep):
    return await services.registry.view_of(identity)


@router.post("/{category}/regenerate")
async def regenerate_invites(
    category: str, identity: IdentityDep, services: ContainerDep,
):
    await services.registry.regenerate(identity, category)
    view = await services.registry.category_view_of(identity, category)
    return {"ok": True, "invites": view}


@router.post(
    "/use", response_model=RedeemResponse, response_model_exclude_none=True,
)
async def use_invite(body: InviteUseRequest, services: ContainerDep):
    redemption = await services.resolver.redeem(body.code)
    return redemption.to_response()
