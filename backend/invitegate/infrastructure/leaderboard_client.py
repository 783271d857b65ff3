"""Leaderboard Client — single GraphQL query for a space's loyalty-points ranks.

Invariants:
    - Exactly one POST per call; no retry, no pagination
    - Non-2xx or transport failure → UpstreamTransportError
    - Non-empty GraphQL `errors` → UpstreamProtocolError (messages joined with " | ")
    - The access token travels in the `access-token` header

Design Decisions:
    - Query text kept verbatim as a module constant so it is greppable
    - cursor_after accepted so a future paginating caller needs no client change
"""

import logging

import httpx
from pydantic import ValidationError

from invitegate.core.errors import UpstreamProtocolError, UpstreamTransportError
from invitegate.schemas.leaderboard import LoyaltyRanksPage, LoyaltyRanksResponse

logger = logging.getLogger(__name__)

_SERVICE = "GraphQL"

SPACE_LOYALTY_RANKS_QUERY = """
query GetSpaceLoyaltyRanks($spaceId: Int!, $sprintId: Int, $cursorAfter: String) {
  spaceLoyaltyPointsRanks(spaceId: $spaceId, sprintId: $sprintId, cursorAfter: $cursorAfter) {
    totalCount
    pageInfo {
      hasNextPage
      endCursor
    }
    list {
      rank
      points
      address {
        username
        address
        avatar
      }
    }
  }
}
"""


class LeaderboardClient:
    """Async GraphQL client for spaceLoyaltyPointsRanks."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.endpoint = endpoint
        self._http = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def fetch_ranks(
        self,
        space_id: int | str,
        access_token: str,
        *,
        sprint_id: int | None = None,
        cursor_after: str | None = None,
    ) -> LoyaltyRanksPage:
        payload = {
            "query": SPACE_LOYALTY_RANKS_QUERY,
            "variables": {
                "spaceId": int(space_id),
                "sprintId": sprint_id,
                "cursorAfter": cursor_after,
            },
        }
        headers = {
            "Content-Type": "application/json",
            "access-token": access_token,
        }
        try:
            response = await self._http.post(self.endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Leaderboard transport error: {e}")
            raise UpstreamTransportError(_SERVICE, str(e) or type(e).__name__)

        if not response.is_success:
            raise UpstreamTransportError(
                _SERVICE, response.text or response.reason_phrase,
                status_code=response.status_code,
            )

        try:
            body = LoyaltyRanksResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamProtocolError(_SERVICE, f"invalid response body: {e}")

        if body.errors:
            raise UpstreamProtocolError(
                _SERVICE, " | ".join(err.message for err in body.errors),
            )

        ranks = (body.data or {}).get("spaceLoyaltyPointsRanks")
        if ranks is None:
            raise UpstreamProtocolError(_SERVICE, "missing spaceLoyaltyPointsRanks")
        try:
            return LoyaltyRanksPage.model_validate(ranks)
        except ValidationError as e:
            raise UpstreamProtocolError(_SERVICE, f"invalid ranks page: {e}")

    async def aclose(self) -> None:
        await self._http.aclose()
