"""Keyed Locks — one asyncio.Lock per identity for read-modify-write sequences.

Invariants:
    - The same key always maps to the same Lock object for the process lifetime
    - Locks are only ever held across a single service operation (no nesting)

Design Decisions:
    - Per-identity granularity: claims and redemptions for different owners
      never wait on each other
    - Locks are never evicted; identities are never deleted either
"""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator

from invitegate.core.domain_types import Identity


class KeyedLocks:
    """Registry of asyncio locks keyed by identity."""

    def __init__(self) -> None:
        self._locks: defaultdict[Identity, asyncio.Lock] = defaultdict(asyncio.Lock)

    @asynccontextmanager
    async def hold(self, key: Identity) -> AsyncIterator[None]:
        async with self._locks[key]:
            yield

    def locked(self, key: Identity) -> bool:
        return key in self._locks and self._locks[key].locked()
