from __future__ import annotations

from typing import Optional

from utils.errors import MalformedHeader, MissingHeader

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header_value: Optional[str]) -> str:
    """
    Return the token carried by an Authorization header value.
    The scheme prefix is case sensitive and must be followed by one space.
    """
    if not header_value:
        raise MissingHeader("Authorization header is missing")
    if not header_value.startswith(BEARER_PREFIX):
        raise MalformedHeader("Authorization header must use the Bearer scheme")
    token = header_value[len(BEARER_PREFIX):]
    if not token:
        raise MalformedHeader("Bearer token is empty")
    return token


def bearer_token_from_request(request) -> str:
    return extract_bearer_token(request.headers.get("Authorization"))
