"""
Opaque refresh tokens.

A refresh token is 32 random bytes, hex encoded, with no structure of its own.
Its owner, expiry and revocation state live in a TokenStore row keyed by the
token value. Lifecycle: active -> expired (time passes) or active -> revoked
(explicit revoke). Both end states are terminal.
"""
from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Protocol

from utils.errors import Expired, Revoked, StoreFailure, TokenNotFound
from utils.security import Clock, utcnow

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
DEFAULT_WINDOW = timedelta(days=60)


@dataclass(frozen=True)
class RefreshTokenRecord:
    token: str
    user_id: uuid.UUID
    created_at: datetime
    expires_at: datetime
    revoked_at: Optional[datetime] = None

    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class TokenStore(Protocol):
    """Durable storage for refresh token records."""

    def put(self, record: RefreshTokenRecord) -> None:
        """Insert a new record. Fails if the token value already exists."""

    def get(self, token: str) -> Optional[RefreshTokenRecord]:
        """Exact-match lookup."""

    def set_revoked(self, token: str, when: datetime) -> int:
        """Set revoked_at on a not-yet-revoked record. Returns rows affected."""

    def delete_all(self) -> int:
        """Remove every record. Returns rows deleted."""


class RefreshTokenService:
    def __init__(self, store: TokenStore, window: timedelta = DEFAULT_WINDOW, clock: Clock = utcnow):
        if window <= timedelta(0):
            raise ValueError("refresh token window must be positive")
        self._store = store
        self._window = window
        self._clock = clock

    @staticmethod
    def generate() -> str:
        return secrets.token_hex(TOKEN_BYTES)

    def create(self, user_id: uuid.UUID) -> RefreshTokenRecord:
        """
        Mint and persist a new refresh token for user_id.
        The token is only returned once the store has accepted it.
        """
        now = self._clock()
        record = RefreshTokenRecord(
            token=self.generate(),
            user_id=user_id,
            created_at=now,
            expires_at=now + self._window,
        )
        try:
            self._store.put(record)
        except StoreFailure:
            raise
        except Exception as exc:
            raise StoreFailure("could not persist refresh token") from exc
        logger.debug("refresh token issued for user %s", user_id)
        return record

    def validate(self, token: str) -> uuid.UUID:
        """Return the owner of an active token. Never mutates the record."""
        record = self._lookup(token)
        if record is None:
            raise TokenNotFound("refresh token not found")
        if record.is_revoked():
            raise Revoked("refresh token revoked")
        if record.is_expired(self._clock()):
            raise Expired("refresh token expired")
        return record.user_id

    def revoke(self, token: str) -> None:
        """
        Revoke a token. Unknown tokens raise TokenNotFound; revoking a token
        twice succeeds and keeps the first revocation time.
        """
        try:
            affected = self._store.set_revoked(token, self._clock())
        except StoreFailure:
            raise
        except Exception as exc:
            raise StoreFailure("could not revoke refresh token") from exc
        if affected:
            logger.info("refresh token revoked")
            return
        if self._lookup(token) is None:
            raise TokenNotFound("refresh token not found")

    def reset_all(self) -> int:
        try:
            deleted = self._store.delete_all()
        except StoreFailure:
            raise
        except Exception as exc:
            raise StoreFailure("could not delete refresh tokens") from exc
        logger.warning("deleted %d refresh tokens", deleted)
        return deleted

    def _lookup(self, token: str) -> Optional[RefreshTokenRecord]:
        if not token:
            return None
        try:
            return self._store.get(token)
        except StoreFailure:
            raise
        except Exception as exc:
            raise StoreFailure("could not read refresh token") from exc
