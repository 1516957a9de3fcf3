"""Refresh token store interface and the in-memory default."""

import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime

import structlog

from bearer_auth.core.exceptions import (
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
)
from bearer_auth.schemas.token_schema import RefreshTokenData

logger = structlog.get_logger()


class RefreshTokenStore(ABC):
    """Bookkeeping for issued refresh tokens, keyed by their ``jti``."""

    @abstractmethod
    async def save(self, data: RefreshTokenData) -> None:
        """Record an issued refresh token."""

    @abstractmethod
    async def get(self, token_id: str) -> RefreshTokenData:
        """Fetch an entry.

        Raises:
            RefreshTokenNotFoundError: No entry for ``token_id``.
            RefreshTokenExpiredError: The entry is past its expiry.
        """

    @abstractmethod
    async def invalidate(self, token_id: str) -> bool:
        """Mark an entry revoked.

        Returns True only for the call that revoked a live entry, so
        concurrent rotations of one token have a single winner.
        """

    @abstractmethod
    async def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""


class MemoryRefreshTokenStore(RefreshTokenStore):
    """Process-local store; entries do not survive a restart."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, RefreshTokenData] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def save(self, data: RefreshTokenData) -> None:
        with self._lock:
            self._entries[data.token_id] = data

    async def get(self, token_id: str) -> RefreshTokenData:
        with self._lock:
            data = self._entries.get(token_id)
            if data is None:
                raise RefreshTokenNotFoundError(token_id)
            if data.is_expired():
                del self._entries[token_id]
                raise RefreshTokenExpiredError(token_id)
            return data

    async def invalidate(self, token_id: str) -> bool:
        with self._lock:
            data = self._entries.get(token_id)
            if data is None or data.revoked:
                return False
            self._entries[token_id] = data.model_copy(update={"revoked": True})
        logger.info("Refresh token revoked", token_id=token_id)
        return True

    async def purge_expired(self) -> int:
        now = datetime.now(UTC)
        with self._lock:
            expired = [k for k, v in self._entries.items() if v.is_expired(now)]
            for token_id in expired:
                del self._entries[token_id]
        if expired:
            logger.info("Purged expired refresh tokens", count=len(expired))
        return len(expired)


def default_store() -> RefreshTokenStore:
    """Create the default (in-memory) refresh token store."""
    return MemoryRefreshTokenStore()
