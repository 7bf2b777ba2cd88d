"""
User accounts collaborator: lookups and writes for the users table.
"""
from __future__ import annotations

import uuid
from typing import Optional

from models.db_storage import DBStorage
from models.user import User


class EmailTaken(Exception):
    """Another account already uses this email."""


class UserStore:
    def __init__(self, storage: DBStorage):
        self._storage = storage

    def _query(self):
        return self._storage.get_session().query(User)

    def get(self, user_id: uuid.UUID) -> Optional[User]:
        return self._storage.get(User, str(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._query().filter(User.email == email).first()

    def create(self, email: str, password_hash: str) -> User:
        if self.get_by_email(email) is not None:
            raise EmailTaken(email)
        user = User(email=email, password_hash=password_hash)
        self._storage.new(user)
        self._storage.save()
        return user

    def update(self, user_id: uuid.UUID, email: str, password_hash: str) -> Optional[User]:
        user = self.get(user_id)
        if user is None:
            return None
        other = self.get_by_email(email)
        if other is not None and other.id != user.id:
            raise EmailTaken(email)
        user.email = email
        user.password_hash = password_hash
        self._storage.new(user)
        self._storage.save()
        return user

    def delete_all(self) -> int:
        deleted = self._query().delete(synchronize_session=False)
        self._storage.save()
        return deleted
