from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g, abort

from models.schemas.user import CredentialsSchema, UserOutSchema
from utils.decorators import jwt_required

from .auth import issue_session
from .deps import get_services

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__)

credentials_schema = CredentialsSchema()
user_out_schema = UserOutSchema()


@bp.post("/users")
def create_user():
    """
    Create a user account.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Email already registered
      422:
        description: Validation error
    """
    data = credentials_schema.load(request.get_json(silent=True) or {})
    services = get_services()

    user = services.users.create(data["email"], services.passwords.hash(data["password"]))
    logger.info("user %s created", user.id)
    return jsonify(user_out_schema.dump(user)), 201


@bp.put("/users")
@jwt_required()
def update_user():
    """
    Update the authenticated user's email and password.
    Returns the user with a fresh access token and refresh token.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      409:
        description: Email already registered
    """
    data = credentials_schema.load(request.get_json(silent=True) or {})
    services = get_services()

    user = services.users.update(g.current_user_id, data["email"], services.passwords.hash(data["password"]))
    if user is None:
        # token subject no longer exists
        abort(401, description="Unauthorized")

    body = user_out_schema.dump(user)
    body.update(issue_session(services, user))
    return jsonify(body), 200
