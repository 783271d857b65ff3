"""Twitter OAuth2 Client — authorization-code-with-PKCE flow and profile fetch.

Invariants:
    - Every authorization request carries a fresh state and S256 code challenge
    - Transport failures and non-2xx responses map to UpstreamTransportError
    - A 2xx users/me response without `data` maps to UpstreamProtocolError
    - No retries: a failed call fails the whole request

Design Decisions:
    - httpx.AsyncClient owned by the client object, closed on app shutdown
    - Client secret optional: confidential clients authenticate with HTTP basic,
      public clients send only client_id in the form body
"""

import base64
import hashlib
import logging
import secrets
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from invitegate.core.accounts import OAuthTokens, TwitterProfile
from invitegate.core.domain_types import Clock, Identity, utc_now
from invitegate.core.errors import (
    ConfigurationError,
    UpstreamProtocolError,
    UpstreamTransportError,
)
from invitegate.schemas.twitter import TokenResponse, UsersMeResponse

logger = logging.getLogger(__name__)

_SERVICE = "Twitter"
_USER_FIELDS = "profile_image_url,public_metrics,created_at,verified"


@dataclass(frozen=True)
class AuthorizationRequest:
    """What /login needs: where to send the user and what to remember."""
    url: str
    state: str
    code_verifier: str


def make_code_verifier() -> str:
    return secrets.token_urlsafe(64)


def code_challenge_for(verifier: str) -> str:
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


class TwitterOAuthClient:
    """Thin async wrapper over the Twitter OAuth2 and v2 users endpoints."""

    def __init__(
        self,
        client_id: str | None,
        client_secret: str = "",
        *,
        authorize_url: str = "https://twitter.com/i/oauth2/authorize",
        token_url: str = "https://api.twitter.com/2/oauth2/token",
        api_base_url: str = "https://api.twitter.com/2",
        scopes: list[str] | None = None,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        clock: Clock = utc_now,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.authorize_url = authorize_url
        self.token_url = token_url
        self.api_base_url = api_base_url.rstrip("/")
        self.scopes = scopes or ["tweet.read", "users.read", "offline.access"]
        self._http = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self._clock = clock

    @property
    def configured(self) -> bool:
        return bool(self.client_id)

    def _require_client_id(self) -> str:
        if not self.client_id:
            raise ConfigurationError("CLIENT_ID")
        return self.client_id

    def build_authorization(self, redirect_uri: str) -> AuthorizationRequest:
        """Create the provider authorize URL with fresh state and PKCE verifier."""
        client_id = self._require_client_id()
        state = secrets.token_urlsafe(24)
        verifier = make_code_verifier()
        query = urlencode({
            "response_type": "code",
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "scope": " ".join(self.scopes),
            "state": state,
            "code_challenge": code_challenge_for(verifier),
            "code_challenge_method": "S256",
        })
        return AuthorizationRequest(
            url=f"{self.authorize_url}?{query}", state=state, code_verifier=verifier,
        )

    async def exchange_code(
        self, code: str, code_verifier: str, redirect_uri: str,
    ) -> OAuthTokens:
        """Swap the callback's authorization code for access/refresh tokens."""
        client_id = self._require_client_id()
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "code_verifier": code_verifier,
            "client_id": client_id,
        }
        auth = (client_id, self.client_secret) if self.client_secret else None
        response = await self._send("POST", self.token_url, data=form, auth=auth)
        try:
            body = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamProtocolError(_SERVICE, f"invalid token response: {e}")
        return OAuthTokens(
            access_token=body.access_token,
            refresh_token=body.refresh_token,
            expires_in=body.expires_in,
        )

    async def fetch_me(self, access_token: str) -> TwitterProfile:
        """Fetch the authenticated user's profile snapshot."""
        response = await self._send(
            "GET",
            f"{self.api_base_url}/users/me",
            params={"user.fields": _USER_FIELDS},
            headers={"Authorization": f"Bearer {access_token}"},
        )
        try:
            body = UsersMeResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamProtocolError(_SERVICE, f"invalid users/me response: {e}")
        if body.data is None:
            raise UpstreamProtocolError(_SERVICE, "Empty user returned from Twitter")

        user = body.data
        return TwitterProfile(
            id=Identity(user.id),
            name=user.name,
            username=user.username,
            profile_image_url=user.profile_image_url,
            followers=user.followers,
            created_at=user.created_at or self._clock(),
            verified=bool(user.verified),
        )

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{_SERVICE} transport error on {url}: {e}")
            raise UpstreamTransportError(_SERVICE, str(e) or type(e).__name__)
        if not response.is_success:
            raise UpstreamTransportError(
                _SERVICE, response.text or response.reason_phrase,
                status_code=response.status_code,
            )
        return response

    async def aclose(self) -> None:
        await self._http.aclose()
