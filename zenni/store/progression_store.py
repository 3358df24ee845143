"""
Progression record storage

RewardService only needs get/upsert semantics on a per-user record, so
any key-value backend (Firestore document, Postgres row, Redis hash) can
implement ProgressionStore. InMemoryProgressionStore backs local runs and
tests; it is not persisted.
"""

import asyncio
import logging
from typing import Protocol

from zenni.exceptions import ProgressionNotFoundError
from zenni.models.progression import ProgressionState

logger = logging.getLogger(__name__)


class ProgressionStore(Protocol):
    """User-record store for progression state"""

    async def get_progression(self, user_id: str) -> ProgressionState:
        """Fetch state; raises ProgressionNotFoundError when absent"""
        ...

    async def upsert_progression(self, user_id: str, state: ProgressionState) -> None:
        """Merge-style write of every progression field"""
        ...

    async def create_progression(self, user_id: str) -> ProgressionState:
        """Create a fresh record (or return the existing one)"""
        ...


class InMemoryProgressionStore:
    """In-memory ProgressionStore (NOT persisted)"""

    def __init__(self):
        self._records: dict[str, dict] = {}
        self._lock = asyncio.Lock()

    async def get_progression(self, user_id: str) -> ProgressionState:
        async with self._lock:
            record = self._records.get(user_id)
        if record is None:
            raise ProgressionNotFoundError(user_id=user_id, operation="get_progression")
        return ProgressionState(**record)

    async def upsert_progression(self, user_id: str, state: ProgressionState) -> None:
        async with self._lock:
            record = self._records.setdefault(user_id, {})
            record.update(state.model_dump())
        logger.debug(f"Saved progression for {user_id} to memory store")

    async def create_progression(self, user_id: str) -> ProgressionState:
        async with self._lock:
            if user_id not in self._records:
                self._records[user_id] = ProgressionState().model_dump()
                logger.info(f"Created progression record for {user_id}")
            record = self._records[user_id]
        return ProgressionState(**record)

