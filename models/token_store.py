"""
SQL-backed refresh token store built on DBStorage.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from models.base_model import as_utc
from models.db_storage import DBStorage
from models.refresh_token import RefreshToken
from utils.errors import StoreFailure
from utils.refresh_tokens import RefreshTokenRecord


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        token=row.token,
        user_id=uuid.UUID(row.user_id),
        created_at=as_utc(row.created_at),
        expires_at=as_utc(row.expires_at),
        revoked_at=as_utc(row.revoked_at),
    )


class SQLTokenStore:
    def __init__(self, storage: DBStorage):
        self._storage = storage

    def put(self, record: RefreshTokenRecord) -> None:
        row = RefreshToken(
            token=record.token,
            user_id=str(record.user_id),
            created_at=record.created_at,
            updated_at=record.created_at,
            expires_at=record.expires_at,
            revoked_at=record.revoked_at,
        )
        try:
            self._storage.new(row)
            self._storage.save()
        except SQLAlchemyError as exc:
            raise StoreFailure("refresh token insert failed") from exc

    def get(self, token: str) -> Optional[RefreshTokenRecord]:
        session = self._storage.get_session()
        try:
            # bypass the identity map so revocations made by bulk UPDATE are visible
            row = session.get(RefreshToken, token, populate_existing=True)
        except SQLAlchemyError as exc:
            raise StoreFailure("refresh token lookup failed") from exc
        return _to_record(row) if row is not None else None

    def set_revoked(self, token: str, when: datetime) -> int:
        session = self._storage.get_session()
        try:
            affected = (
                session.query(RefreshToken)
                .filter(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
                .update({"revoked_at": when, "updated_at": when}, synchronize_session=False)
            )
            self._storage.save()
        except SQLAlchemyError as exc:
            raise StoreFailure("refresh token revoke failed") from exc
        return affected

    def delete_all(self) -> int:
        session = self._storage.get_session()
        try:
            deleted = session.query(RefreshToken).delete(synchronize_session=False)
            self._storage.save()
        except SQLAlchemyError as exc:
            raise StoreFailure("refresh token reset failed") from exc
        return deleted
