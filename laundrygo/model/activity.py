# laundrygo/model/activity.py
from ..extensions import db
from ..utils.api import utcnow

class ActivityLog(db.Model):
    # plain text columns, no foreign keys: rows must outlive the orders they describe
    __tablename__ = "activity_logs"

    id = db.Column(db.Integer, primary_key=True)
    actor_name = db.Column(db.String(180), nullable=False)
    actor_type = db.Column(db.String(20), default="system")  # customer|employee|driver|system|owner
    action = db.Column(db.String(64), nullable=False, index=True)
    entity_type = db.Column(db.String(32), nullable=False)
    entity_id = db.Column(db.String(36), index=True)
    entity_name = db.Column(db.String(120))
    description = db.Column(db.String(500), nullable=False)
    severity = db.Column(db.String(16), default="info")  # info|warning|error|critical
    branch_id = db.Column(db.Integer, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, index=True)
