from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request


def role_required(*roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt()
            role = claims.get("role")
            if role not in roles:
                return jsonify({
                    "success": False,
                    "kind": "forbidden",
                    "message": "You do not have permission to perform this action."
                }), 403
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def current_actor_id() -> int:
    """Staff id from the verified JWT; recorded as the actor of lending operations."""
    return int(get_jwt_identity())
