# arbcasino/game/store.py
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator

from arbcasino.game.errors import StaleSpinState
from arbcasino.game.ledger import UserSpinState


class UserLocks:
    """
    One asyncio.Lock per user id (in-process serialization only).
    Holds no game data; the store remains the system of record.
    """

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}
        self._holders: dict[int, int] = {}

    def get(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[user_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, user_id: int) -> AsyncIterator[None]:
        lock = self.get(user_id)
        self._holders[user_id] = self._holders.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            # drop the lock once nobody holds or waits on it
            self._holders[user_id] -= 1
            if self._holders[user_id] == 0:
                self._holders.pop(user_id, None)
                self._locks.pop(user_id, None)


class SpinStateStore(ABC):
    """
    Persistence provider for UserSpinState.

    Callers run load -> mutate -> save inside `lock(user_id)`; everything
    done inside the block is applied atomically for that user.
    """

    @abstractmethod
    def lock(self, user_id: int):
        """Async context manager serializing work for one user."""

    @abstractmethod
    async def load(self, user_id: int) -> UserSpinState: ...

    @abstractmethod
    async def save(self, user_id: int, state: UserSpinState) -> None: ...


class MemorySpinStateStore(SpinStateStore):
    """Dict-backed provider for tests and local runs. Not durable."""

    def __init__(self, locks: UserLocks | None = None) -> None:
        self.locks = locks or UserLocks()
        self._rows: dict[int, UserSpinState] = {}

    def lock(self, user_id: int):
        return self.locks.hold(user_id)

    async def load(self, user_id: int) -> UserSpinState:
        # yield to the loop like a real backend would
        await asyncio.sleep(0)
        row = self._rows.get(user_id)
        return row.copy() if row is not None else UserSpinState()

    async def save(self, user_id: int, state: UserSpinState) -> None:
        await asyncio.sleep(0)
        current = self._rows.get(user_id)
        current_version = current.version if current is not None else 0
        if state.version != current_version:
            raise StaleSpinState(user_id)

        stored = state.copy()
        stored.version = current_version + 1
        self._rows[user_id] = stored
        state.version = stored.version

    def put(self, user_id: int, state: UserSpinState) -> None:
        """Seed a row directly (tests, fixtures)."""
        stored = state.copy()
        stored.version = (self._rows[user_id].version + 1) if user_id in self._rows else 0
        self._rows[user_id] = stored
