from __future__ import annotations
import logging
from functools import wraps
from flask import request, g, abort, current_app

from api.deps import get_services
from utils.bearer import bearer_token_from_request

logger = logging.getLogger(__name__)


def jwt_required():
    """
    Require a valid Bearer access token. On success g.current_user_id holds
    the token subject; any failure propagates as an AuthenticationError.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token_from_request(request)
            claims = get_services().access_tokens.decode(token)
            g.current_user_id = claims.subject
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def platform_required(platform: str):
    """Allow the view only when PLATFORM matches; 403 otherwise."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            current = current_app.config.get("PLATFORM")
            if current != platform:
                logger.warning("refused %s %s on platform %r", request.method, request.path, current)
                abort(403, description="Forbidden")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
