"""Per-application collaborators shared by the blueprints."""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from models import DBStorage, UserStore
from utils.refresh_tokens import RefreshTokenService
from utils.security import AccessTokenCodec, PasswordHasher

EXTENSION_KEY = "chirpy"


@dataclass(frozen=True)
class Services:
    storage: DBStorage
    users: UserStore
    passwords: PasswordHasher
    access_tokens: AccessTokenCodec
    refresh_tokens: RefreshTokenService


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
