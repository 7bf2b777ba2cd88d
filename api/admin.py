import logging

from flask import Blueprint, jsonify

from utils.decorators import platform_required

from .deps import get_services

logger = logging.getLogger(__name__)

bp = Blueprint("admin", __name__)


@bp.post("/reset")
@platform_required("dev")
def reset():
    """
    Delete every refresh token and user. Only available when PLATFORM=dev.
    ---
    tags:
      - Admin
    responses:
      200:
        description: Reset done
      403:
        description: Forbidden outside dev
    """
    services = get_services()
    tokens = services.refresh_tokens.reset_all()
    users = services.users.delete_all()
    logger.warning("reset: removed %d users and %d refresh tokens", users, tokens)
    return jsonify({"users_deleted": users, "refresh_tokens_deleted": tokens}), 200
