from flask import g, jsonify

from ..errors import NotFound
from ..extensions import db
from ..model import Notification
from ..utils.api import api_ok
from ..utils.decorators import login_required
from . import bp

@bp.get("")
@login_required
def list_notifications():
    notes = (Notification.query.filter_by(user_id=g.user.id)
                               .order_by(Notification.created_at.desc(), Notification.id.desc())
                               .limit(100)
                               .all())
    return jsonify(api_ok("notifications", {
        "items": [n.as_api() for n in notes],
        "unread": sum(1 for n in notes if not n.is_read),
    }))

@bp.put("/<int:note_id>/read")
@login_required
def mark_as_read(note_id):
    note = Notification.query.filter_by(id=note_id, user_id=g.user.id).first()
    if not note:
        raise NotFound("notification not found")
    note.is_read = True
    db.session.commit()
    return jsonify(api_ok("Marked as read", {"id": note.id}))
