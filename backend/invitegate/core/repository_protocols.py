"""Boundary Protocols — contracts between core rules and the stores behind them.

Invariants:
    - Services only touch state through these protocols
    - Implementations provided by infrastructure via dependency injection
    - Values read from a store must be written back with set() after mutation

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: the in-memory store never awaits, but a persistent
      store would do IO behind the same methods
"""

from typing import Protocol, TypeVar

from invitegate.core.accounts import ClaimRecord, UserRecord
from invitegate.core.domain_types import Identity
from invitegate.core.invite_codes import InviteBundle

V = TypeVar("V")


class KeyValueStore(Protocol[V]):
    """Identity-keyed store: get / set / iterate."""
    async def get(self, key: Identity) -> V | None: ...
    async def set(self, key: Identity, value: V) -> None: ...
    async def items(self) -> list[tuple[Identity, V]]: ...


UserStore = KeyValueStore[UserRecord]
ClaimStore = KeyValueStore[ClaimRecord]
InviteStore = KeyValueStore[InviteBundle]
