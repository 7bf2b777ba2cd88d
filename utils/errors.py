"""
Authentication error taxonomy.

Everything raised by the security helpers derives from AuthError.
AuthenticationError subclasses are expected, caller-facing failures and are
collapsed into one generic 401 by api.errors; the rest are internal faults.
"""
from __future__ import annotations


class AuthError(Exception):
    """Base class for every error raised by the auth core."""


class AuthenticationError(AuthError):
    """The caller could not be authenticated (always reported as a 401)."""


class HashingFailure(AuthError):
    """Password hashing or verification failed for a non-mismatch reason."""


class MismatchError(AuthenticationError):
    """Plaintext does not match the stored password hash."""


class SigningFailure(AuthError):
    """An access token could not be signed."""


class InvalidToken(AuthenticationError):
    """Token signature, format or claims are not acceptable."""


class Expired(AuthenticationError):
    """Token (access or refresh) is past its expiry instant."""


class MissingHeader(AuthenticationError):
    """No Authorization header was supplied."""


class MalformedHeader(AuthenticationError):
    """Authorization header does not use the Bearer scheme."""


class TokenNotFound(AuthenticationError):
    """No refresh token record matches the supplied value."""


class Revoked(AuthenticationError):
    """Refresh token has been revoked."""


class StoreFailure(AuthError):
    """The token store could not complete an operation."""
