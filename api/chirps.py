from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g, abort

from models.chirp import Chirp, CHIRP_MAX_LENGTH
from models.schemas.chirp import ChirpCreateSchema, ChirpOutSchema
from utils.decorators import jwt_required

from .deps import get_services

logger = logging.getLogger(__name__)

bp = Blueprint("chirps", __name__)

chirp_create_schema = ChirpCreateSchema()
chirp_out_schema = ChirpOutSchema()


@bp.post("/chirps")
@jwt_required()
def create_chirp():
    """
    Post a chirp as the authenticated user.
    ---
    tags:
      - Chirps
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
            body: { type: string, maxLength: 140 }
    responses:
      201:
        description: Created
      400:
        description: Chirp is too long
      401:
        description: Unauthorized
    """
    data = chirp_create_schema.load(request.get_json(silent=True) or {})
    if len(data["body"]) > CHIRP_MAX_LENGTH:
        abort(400, description="Chirp is too long")

    services = get_services()
    if services.users.get(g.current_user_id) is None:
        # token subject no longer exists
        abort(401, description="Unauthorized")

    chirp = Chirp(body=data["body"], user_id=str(g.current_user_id))
    services.storage.new(chirp)
    services.storage.save()
    logger.info("chirp %s posted by user %s", chirp.id, chirp.user_id)
    return jsonify(chirp_out_schema.dump(chirp)), 201
