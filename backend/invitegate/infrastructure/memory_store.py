"""In-Memory Store — dict-backed KeyValueStore for single-process deployments.

Invariants:
    - items() returns a snapshot list; callers may mutate the store while iterating it
    - State is lost on restart (no persistence by design of the deployment)

Design Decisions:
    - One generic class serves users, claims and invite bundles
"""

from typing import Generic, TypeVar

from invitegate.core.domain_types import Identity

V = TypeVar("V")


class InMemoryStore(Generic[V]):
    """Async dict wrapper satisfying core.repository_protocols.KeyValueStore."""

    def __init__(self) -> None:
        self._data: dict[Identity, V] = {}

    async def get(self, key: Identity) -> V | None:
        return self._data.get(key)

    async def set(self, key: Identity, value: V) -> None:
        self._data[key] = value

    async def items(self) -> list[tuple[Identity, V]]:
        return list(self._data.items())

    def __len__(self) -> int:
        return len(self._data)
