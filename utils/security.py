"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access token creation/verification via PyJWT
- JTI generation for token identifiers
"""
from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Union

import jwt
from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError, VerifyMismatchError

from utils.errors import Expired, HashingFailure, InvalidToken, MismatchError, SigningFailure

Clock = Callable[[], datetime]

JWT_ALGORITHM = "HS256"
DEFAULT_ISSUER = "chirpy"
REQUIRED_CLAIMS = ("iss", "sub", "iat", "exp", "jti")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


class PasswordHasher:
    """
    Salted one-way password hashing (Argon2id).

    time_cost is the work factor: each verification repeats the memory-hard
    pass that many times. Instances hold no mutable state and can be shared
    between requests.
    """

    def __init__(self, time_cost: int = 10, memory_cost: int = 19456, parallelism: int = 1):
        self._ph = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )
        # checked against when the account does not exist, so that path costs the same
        self.dummy_hash = self._ph.hash(secrets.token_hex(16))

    def hash(self, password: str) -> str:
        """Hash a plaintext password; every call embeds a fresh salt."""
        try:
            return self._ph.hash(password)
        except HashingError as exc:
            raise HashingFailure("password hashing failed") from exc

    def verify(self, password: str, password_hash: str) -> None:
        """
        Check a plaintext password against a stored hash.
        Raises MismatchError if it does not match, HashingFailure if the
        stored hash cannot be checked at all.
        """
        try:
            self._ph.verify(password_hash, password)
        except VerifyMismatchError as exc:
            raise MismatchError("password does not match") from exc
        except InvalidHashError as exc:
            raise HashingFailure("stored password hash is malformed") from exc
        except VerificationError as exc:
            raise HashingFailure("password verification failed") from exc

    def needs_rehash(self, password_hash: str) -> bool:
        return self._ph.check_needs_rehash(password_hash)


@dataclass(frozen=True)
class AccessClaims:
    issuer: str
    subject: uuid.UUID
    issued_at: datetime
    expires_at: datetime
    jti: str


def _numeric_date(payload: dict, name: str) -> datetime:
    value = payload.get(name)
    # bool is an int subclass; reject it explicitly
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidToken(f"claim '{name}' must be an integer timestamp")
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _string_claim(payload: dict, name: str) -> str:
    value = payload.get(name)
    if not isinstance(value, str) or not value:
        raise InvalidToken(f"claim '{name}' must be a non-empty string")
    return value


class AccessTokenCodec:
    """
    Issues and verifies short-lived HS256 access tokens.

    The signing secret is injected once and treated as an opaque key. A codec
    built with a different secret rejects every token signed by this one.
    """

    def __init__(self, secret: Union[str, bytes], issuer: str = DEFAULT_ISSUER, clock: Clock = utcnow):
        self._secret = secret
        self._issuer = issuer
        self._clock = clock

    def issue(self, subject: uuid.UUID, ttl: timedelta) -> str:
        now = self._clock()
        payload = {
            "iss": self._issuer,
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": generate_jti(),
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise SigningFailure("could not sign access token") from exc

    def decode(self, token: str) -> AccessClaims:
        """
        Verify the signature, then every claim field by field.
        Raises InvalidToken for anything malformed or badly signed and
        Expired once the clock has passed 'exp'.
        """
        if not isinstance(token, str) or not token:
            raise InvalidToken("token is empty")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={
                    "require": list(REQUIRED_CLAIMS),
                    # expiry is checked below against the injected clock
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (jwt.InvalidTokenError, TypeError, ValueError) as exc:
            raise InvalidToken(str(exc)) from exc

        issuer = _string_claim(payload, "iss")
        if issuer != self._issuer:
            raise InvalidToken("unexpected issuer")
        try:
            subject = uuid.UUID(_string_claim(payload, "sub"))
        except ValueError as exc:
            raise InvalidToken("subject is not a valid identifier") from exc
        claims = AccessClaims(
            issuer=issuer,
            subject=subject,
            issued_at=_numeric_date(payload, "iat"),
            expires_at=_numeric_date(payload, "exp"),
            jti=_string_claim(payload, "jti"),
        )
        # NumericDate has whole-second precision; compare at the same precision
        if int(self._clock().timestamp()) > int(claims.expires_at.timestamp()):
            raise Expired("access token expired")
        return claims

    def verify(self, token: str) -> uuid.UUID:
        return self.decode(token).subject
