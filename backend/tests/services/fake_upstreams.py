"""Fake upstreams — MockTransport handlers for Twitter and GraphQL, plus a pinned clock.

Used by conftest fixtures and imported directly by tests that need the
constants (NOW, ELIGIBLE_USER) or the login() helper.
"""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import httpx
from httpx import AsyncClient

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

ELIGIBLE_USER = {
    "id": "1001",
    "name": "Alice",
    "username": "alice",
    "profile_image_url": "https://pbs.twimg.com/alice.jpg",
    "created_at": "2020-03-01T10:00:00.000Z",
    "verified": False,
    "public_metrics": {"followers_count": 500, "following_count": 10, "tweet_count": 42},
}


class FakeClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeTwitterAPI:
    """Answers /2/oauth2/token and /2/users/me like the real provider."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.user: dict | None = dict(ELIGIBLE_USER)
        self.token_status = 200
        self.me_status = 200

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/2/oauth2/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, text="invalid_request")
            return httpx.Response(200, json={
                "token_type": "bearer",
                "expires_in": 7200,
                "access_token": "access-token-1",
                "refresh_token": "refresh-token-1",
                "scope": "tweet.read users.read offline.access",
            })
        if request.url.path == "/2/users/me":
            if self.me_status != 200:
                return httpx.Response(self.me_status, text="Unauthorized")
            return httpx.Response(200, json={"data": self.user} if self.user else {})
        return httpx.Response(404)


class FakeGraphQLAPI:
    """Answers spaceLoyaltyPointsRanks with a configurable first page."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.errors: list[dict] | None = None
        self.addresses = [
            "0x4bdcb795842b0c029095687f2fd7dd15c52f443d",
            "0x1111111111111111111111111111111111111111",
        ]
        self.has_next_page = False

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status != 200:
            return httpx.Response(self.status, text="upstream down")
        if self.errors:
            return httpx.Response(200, json={"data": None, "errors": self.errors})
        return httpx.Response(200, json={
            "data": {
                "spaceLoyaltyPointsRanks": {
                    "totalCount": len(self.addresses) + (50 if self.has_next_page else 0),
                    "pageInfo": {
                        "hasNextPage": self.has_next_page,
                        "endCursor": "cursor-1" if self.has_next_page else None,
                    },
                    "list": [
                        {
                            "rank": i + 1,
                            "points": 1000 - i * 10,
                            "address": {"username": f"user{i}", "address": a, "avatar": ""},
                        }
                        for i, a in enumerate(self.addresses)
                    ],
                },
            },
        })


async def login(client: AsyncClient) -> httpx.Response:
    """Run /login → /callback against the fake provider; returns the callback response."""
    res = await client.get("/login")
    assert res.status_code == 302
    state = parse_qs(urlparse(res.headers["location"]).query)["state"][0]
    return await client.get("/callback", params={"state": state, "code": "auth-code-1"})

