# ------- laundrygo/utils/decorators.py -------
from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from ..extensions import db
from ..services.access_guard import AccessGuard

def _current_user():
    verify_jwt_in_request()
    return AccessGuard(db.session).resolve(get_jwt_identity())

def login_required(fn):
    """Resolve the JWT caller into ``g.user`` (401 when missing or unknown)."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.user = _current_user()
        return fn(*args, **kwargs)
    return wrapper

def authorize_branch(branch_id):
    """Raise Forbidden unless ``g.user`` is actively assigned to the branch."""
    AccessGuard(db.session).authorize(g.user, branch_id)
