# auth.py
"""Session gating and device API key checks."""
import functools
import hmac

from flask import abort, current_app, jsonify, request
from flask_login import current_user

ROLE_FARMER = "farmer"
ROLE_TECHNICIAN = "technician"


def is_authenticated(user=None):
    user = current_user if user is None else user
    return bool(user) and user.is_authenticated


def has_role(user, role):
    return is_authenticated(user) and getattr(user, "role", None) == role


def is_owner_or_role(greenhouse, user, role=None):
    """True if ``user`` owns ``greenhouse`` or, when ``role`` is given, holds it.

    A missing greenhouse is never accessible.
    """
    if greenhouse is None or not is_authenticated(user):
        return False
    if greenhouse.owner_id == user.id:
        return True
    return role is not None and has_role(user, role)


def role_required(role):
    """View decorator: 403 unless the logged-in user holds ``role``."""
    def decorator(view):
        @functools.wraps(view)
        def wrapped(*args, **kwargs):
            if not has_role(current_user, role):
                abort(403)
            return view(*args, **kwargs)
        return wrapped
    return decorator


def api_key_valid(key):
    expected = current_app.config.get("IOT_API_KEY")
    if not key or not expected:
        return False
    return hmac.compare_digest(str(key).encode("utf-8"), str(expected).encode("utf-8"))


def api_key_required(view):
    @functools.wraps(view)
    def wrapped(*args, **kwargs):
        if not api_key_valid(request.headers.get("X-API-Key")):
            current_app.logger.warning("Rejected API key from %s for %s", request.remote_addr, request.path)
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)
    return wrapped
