"""Account Routes — profile snapshot and the one-time claim.

Invariants:
    - Both endpoints require a stored user record (401 otherwise)
    - /api/me always includes the invite view, creating the bundle if absent
"""

from fastapi import APIRouter

from invitegate.api.dependencies import ContainerDep, UserDep

router = APIRouter(prefix="/api", tags=["account"])


@router.get("/me")
async def me(user: UserDep, services: ContainerDep):
    identity = user.profile.id
    invites = await services.registry.view_of(identity)
    claim = await services.claim_tracker.claimed(identity)
    return {
        "user": user.profile.to_public(),
        "eligible": user.eligible,
        "claimed": {"when": claim.when.isoformat()} if claim else None,
        "invites": invites,
    }


@router.post("/claim")
async def claim(user: UserDep, services: ContainerDep):
    """Claim the demo reward once; resets the caller's whole invite bundle."""
    confirmation = await services.claim_tracker.claim(user.profile.id)
    return confirmation.to_response()
