"""Twitter Login — OAuth2 authorization-code-with-PKCE flow and logout.

Invariants:
    - /login stores {state, code_verifier} in the signed session before redirecting
    - /callback rejects missing code/state and any state that does not match
    - Pending OAuth data is removed from the session after a successful callback
    - The session identity is only ever set by a successful callback

Design Decisions:
    - Signed cookie session (Starlette SessionMiddleware) instead of a server-side
      session store: nothing to persist, and the uid cannot be forged client-side
"""

import logging
import secrets

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from invitegate.api.dependencies import (
    SESSION_IDENTITY_KEY,
    SESSION_OAUTH_KEY,
    ContainerDep,
)
from invitegate.config import Settings, get_settings
from invitegate.core.errors import ConfigurationError, OAuthStateError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.get("/login")
async def login(
    request: Request,
    services: ContainerDep,
    settings: Settings = Depends(get_settings),
):
    """Start the OAuth flow: remember state + verifier, redirect to Twitter."""
    if not services.twitter.configured:
        raise ConfigurationError("CLIENT_ID")
    authorization = services.twitter.build_authorization(settings.redirect_uri)
    request.session[SESSION_OAUTH_KEY] = {
        "state": authorization.state,
        "code_verifier": authorization.code_verifier,
    }
    return RedirectResponse(authorization.url, status_code=status.HTTP_302_FOUND)


@router.get("/callback")
async def callback(
    request: Request,
    services: ContainerDep,
    state: str | None = None,
    code: str | None = None,
    settings: Settings = Depends(get_settings),
):
    """Finish the OAuth flow: exchange the code, snapshot the profile, set the session."""
    if not state or not code:
        raise OAuthStateError("Missing state or code")

    pending = request.session.get(SESSION_OAUTH_KEY)
    if not pending or not secrets.compare_digest(pending.get("state", ""), state):
        raise OAuthStateError("Invalid or expired state")

    tokens = await services.twitter.exchange_code(
        code, pending["code_verifier"], settings.redirect_uri,
    )
    profile = await services.twitter.fetch_me(tokens.access_token)
    await services.directory.record_login(profile, tokens)

    request.session[SESSION_IDENTITY_KEY] = profile.id
    request.session.pop(SESSION_OAUTH_KEY, None)
    return RedirectResponse("/", status_code=status.HTTP_302_FOUND)


@router.post("/api/logout")
async def logout(request: Request):
    request.session.pop(SESSION_IDENTITY_KEY, None)
    return {"ok": True}
