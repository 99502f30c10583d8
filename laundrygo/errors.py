# --- laundrygo/errors.py ---
from flask import jsonify
from .utils.api import api_error


class LifecycleError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 400

    def __init__(self, message, data=None):
        super().__init__(message)
        self.message = message
        self.data = data


class Unauthorized(LifecycleError):
    status_code = 401


class Forbidden(LifecycleError):
    """Caller is not linked to the branch that owns the order."""
    status_code = 403


class NotFound(LifecycleError):
    """The order or item no longer exists (possibly archived by another request)."""
    status_code = 404


class PreconditionFailed(LifecycleError):
    """Input or state does not allow the action; caller must correct it before retrying."""
    status_code = 422


class StoreError(LifecycleError):
    """The primary mutation failed and was rolled back."""
    status_code = 500


def register_error_handlers(app):
    @app.errorhandler(LifecycleError)
    def handle_lifecycle_error(e):
        r = jsonify(api_error(e.message, e.data))
        r.status_code = e.status_code
        return r

    from .extensions import jwt

    @jwt.unauthorized_loader
    def missing_token(reason):
        r = jsonify(api_error(f"Not authenticated: {reason}"))
        r.status_code = 401
        return r

    @jwt.invalid_token_loader
    def invalid_token(reason):
        r = jsonify(api_error(f"Invalid token: {reason}"))
        r.status_code = 401
        return r

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        r = jsonify(api_error("Token has expired"))
        r.status_code = 401
        return r
