"""Service test fixtures — pinned clock, fake upstreams, container + FastAPI client.

Invariants:
    - Every test gets a fresh container (fresh in-memory stores and locks)
    - get_container dependency overridden to return the test container
    - Twitter and GraphQL upstreams answered by httpx.MockTransport fakes
    - The clock is a FakeClock pinned to NOW; tests advance it explicitly

Design Decisions:
    - Route tests log in through the real /login → /callback flow so the signed
      session cookie is exercised end to end
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from invitegate.config import Settings
from invitegate.main import app
from invitegate.services.container import build_container, get_container
from tests.services.fake_upstreams import (
    FakeClock,
    FakeGraphQLAPI,
    FakeTwitterAPI,
    login,
)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def twitter_api():
    return FakeTwitterAPI()


@pytest.fixture
def graphql_api():
    return FakeGraphQLAPI()


@pytest.fixture
def settings():
    return Settings(_env_file=None, client_id="test-client-id")


@pytest.fixture
async def services(settings, clock, twitter_api, graphql_api):
    container = build_container(
        settings,
        clock=clock,
        twitter_http=httpx.AsyncClient(transport=httpx.MockTransport(twitter_api.handle)),
        leaderboard_http=httpx.AsyncClient(transport=httpx.MockTransport(graphql_api.handle)),
    )
    yield container
    await container.aclose()


@pytest.fixture
def registry(services):
    return services.registry


@pytest.fixture
def resolver(services):
    return services.resolver


@pytest.fixture
def claim_tracker(services):
    return services.claim_tracker


@pytest.fixture
async def client(services):
    """FastAPI test client with the service container overridden."""
    app.dependency_overrides[get_container] = lambda: services

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def logged_in(client, twitter_api):
    """Client whose session belongs to twitter_api.user (ELIGIBLE_USER by default)."""
    res = await login(client)
    assert res.status_code == 302
    return client
