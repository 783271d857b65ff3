"""Service Container — wires stores, locks, services and upstream clients together.

Invariants:
    - One container per process, initialized on startup via lifespan
    - All services share the same KeyedLocks, so a claim and a redemption on
      the same owner serialize with each other
    - get_container() fails loudly when startup never ran

Design Decisions:
    - Module-level singleton mirrors the lifecycle of the in-memory stores
      (single-process uvicorn; state lost on restart)
    - Tests build their own container and override get_container
"""

from dataclasses import dataclass

import httpx

from invitegate.config import Settings
from invitegate.core.accounts import ClaimRecord, UserRecord
from invitegate.core.domain_types import Clock, utc_now
from invitegate.core.invite_codes import InviteBundle
from invitegate.core.repository_protocols import ClaimStore, InviteStore, UserStore
from invitegate.infrastructure.keyed_locks import KeyedLocks
from invitegate.infrastructure.leaderboard_client import LeaderboardClient
from invitegate.infrastructure.memory_store import InMemoryStore
from invitegate.infrastructure.twitter_client import TwitterOAuthClient
from invitegate.services.claim_tracker import ClaimTracker
from invitegate.services.invite_registry import InviteRegistry
from invitegate.services.invite_resolver import InviteResolver
from invitegate.services.user_directory import UserDirectory


@dataclass
class ServiceContainer:
    users: UserStore
    claims: ClaimStore
    invites: InviteStore
    locks: KeyedLocks
    registry: InviteRegistry
    resolver: InviteResolver
    claim_tracker: ClaimTracker
    directory: UserDirectory
    twitter: TwitterOAuthClient
    leaderboard: LeaderboardClient

    async def aclose(self) -> None:
        await self.twitter.aclose()
        await self.leaderboard.aclose()


def build_container(
    settings: Settings,
    *,
    clock: Clock = utc_now,
    users: UserStore | None = None,
    claims: ClaimStore | None = None,
    invites: InviteStore | None = None,
    twitter_http: httpx.AsyncClient | None = None,
    leaderboard_http: httpx.AsyncClient | None = None,
) -> ServiceContainer:
    """Assemble every service over the given (or fresh in-memory) stores."""
    users = users if users is not None else InMemoryStore[UserRecord]()
    claims = claims if claims is not None else InMemoryStore[ClaimRecord]()
    invites = invites if invites is not None else InMemoryStore[InviteBundle]()
    locks = KeyedLocks()

    registry = InviteRegistry(invites, locks, clock)
    return ServiceContainer(
        users=users,
        claims=claims,
        invites=invites,
        locks=locks,
        registry=registry,
        resolver=InviteResolver(invites, locks, clock),
        claim_tracker=ClaimTracker(users, claims, registry, locks, clock),
        directory=UserDirectory(users, registry, clock),
        twitter=TwitterOAuthClient(
            settings.client_id,
            settings.client_secret,
            authorize_url=settings.twitter_authorize_url,
            token_url=settings.twitter_token_url,
            api_base_url=settings.twitter_api_base_url,
            scopes=settings.twitter_scopes,
            timeout_seconds=settings.http_timeout_seconds,
            http_client=twitter_http,
            clock=clock,
        ),
        leaderboard=LeaderboardClient(
            settings.leaderboard_endpoint,
            timeout_seconds=settings.http_timeout_seconds,
            http_client=leaderboard_http,
        ),
    )


# Singleton (initialized on startup)
container: ServiceContainer | None = None


def init_container(settings: Settings, **kwargs) -> ServiceContainer:
    global container
    container = build_container(settings, **kwargs)
    return container


def get_container() -> ServiceContainer:
    """FastAPI dependency for the process-wide service container."""
    if container is None:
        raise RuntimeError("Service container not initialized")
    return container
