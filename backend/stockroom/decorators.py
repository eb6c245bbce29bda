# Overview: Request decorators for API routes (identity context and error mapping).

from functools import wraps
from flask import request, jsonify, g, current_app

from .immutability import ImmutableRecordError
from .services.access_policy import CurrentUser, PermissionDeniedError, ROLES
from .validation import ValidationError, NotFoundError


def require_auth(f):
    """
    Establish the caller's identity from the upstream auth gateway.

    Authentication itself happens outside this service; the gateway injects
    the verified identity as headers (names configurable, see Config):
    - AUTH_USER_HEADER: user id (required)
    - AUTH_ROLE_HEADER: "Founder" or "Home Chef" (required)
    - AUTH_CHEF_HEADER: the chef's kitchen id (optional)

    Sets g.current_user to a CurrentUser. Returns 401 when the id is
    missing or the role is unknown.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        cfg = current_app.config
        user_id = (request.headers.get(cfg["AUTH_USER_HEADER"]) or "").strip()
        role = (request.headers.get(cfg["AUTH_ROLE_HEADER"]) or "").strip()
        chef_id = (request.headers.get(cfg["AUTH_CHEF_HEADER"]) or "").strip() or None

        if not user_id:
            return jsonify({"error": "Authentication required"}), 401
        if role not in ROLES:
            return jsonify({"error": f"Unknown role: {role or '(none)'}"}), 401

        g.current_user = CurrentUser(id=user_id, role=role, chef_id=chef_id)
        return f(*args, **kwargs)

    return decorated_function


def handle_service_errors(action: str):
    """
    Translate service exceptions into JSON responses.

    ValidationError -> 400, PermissionDeniedError -> 403, NotFoundError -> 404,
    ImmutableRecordError -> 409. Anything else is logged with its traceback
    and reported as 500.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"error": str(e), "kind": "validation"}), 400
            except PermissionDeniedError as e:
                return jsonify({"error": str(e), "kind": "permission"}), 403
            except NotFoundError as e:
                return jsonify({"error": str(e), "kind": "not_found"}), 404
            except ImmutableRecordError as e:
                current_app.logger.warning("Immutable record write rejected: %s", e)
                return jsonify({"error": str(e), "kind": "immutable"}), 409
            except Exception:
                current_app.logger.exception(f"Failed to {action}")
                return jsonify({"error": f"Failed to {action}", "kind": "internal"}), 500

        return decorated_function
    return decorator
