"""
Authentication blueprint:
- POST /login    email + password -> access token and refresh token
- POST /refresh  Bearer <refresh token> -> new access token
- POST /revoke   Bearer <refresh token> -> revokes it

Every failure on these routes surfaces as the same generic 401 (see api.errors).
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, current_app

from models.user import User
from models.schemas.user import UserLoginSchema, UserOutSchema
from utils.bearer import bearer_token_from_request
from utils.errors import MismatchError

from .deps import Services, get_services

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()


def issue_session(services: Services, user: User) -> dict:
    """Mint a refresh token (persisted first) and an access token for user."""
    refresh = services.refresh_tokens.create(user.id_uuid)
    access = services.access_tokens.issue(user.id_uuid, current_app.config["ACCESS_TOKEN_EXPIRES"])
    return {"token": access, "refresh_token": refresh.token}


@bp.post("/login")
def login():
    """
    Login: return access token and refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns user with token and refresh_token)
      401:
        description: Unauthorized
    """
    payload = user_login_schema.load(request.get_json(silent=True) or {})
    services = get_services()

    user = services.users.get_by_email(payload["email"])
    if user is None:
        services.passwords.verify(payload["password"], services.passwords.dummy_hash)
        raise MismatchError("unknown email")
    services.passwords.verify(payload["password"], user.password_hash)
    if services.passwords.needs_rehash(user.password_hash):
        # work factor changed since this hash was stored
        user = services.users.update(user.id_uuid, user.email, services.passwords.hash(payload["password"]))

    body = user_out_schema.dump(user)
    body.update(issue_session(services, user))
    logger.info("user %s logged in", user.id)
    return jsonify(body), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns token)
      401:
        description: Unauthorized
    """
    services = get_services()
    token = bearer_token_from_request(request)
    user_id = services.refresh_tokens.validate(token)
    access = services.access_tokens.issue(user_id, current_app.config["ACCESS_TOKEN_EXPIRES"])
    return jsonify({"token": access}), 200


@bp.post("/revoke")
def revoke():
    """
    Revoke a refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: Revoked
      401:
        description: Unauthorized
    """
    services = get_services()
    token = bearer_token_from_request(request)
    services.refresh_tokens.revoke(token)
    return ("", 204)
