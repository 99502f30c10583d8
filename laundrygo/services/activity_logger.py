# laundrygo/services/activity_logger.py
import logging
from sqlalchemy.exc import SQLAlchemyError

from ..model import ActivityLog

log = logging.getLogger(__name__)


class ActivityLogger:
    """Best-effort audit trail; a failed write never fails the caller."""

    def __init__(self, session):
        self.session = session

    def record(self, *, actor_name, action, entity_type, description,
               actor_type="employee", entity_id=None, entity_name=None,
               severity="info", branch_id=None):
        try:
            row = ActivityLog(
                actor_name=actor_name or "System",
                actor_type=actor_type,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                entity_name=entity_name,
                description=description,
                severity=severity,
                branch_id=branch_id,
            )
            self.session.add(row)
            self.session.commit()
            return row
        except SQLAlchemyError:
            self.session.rollback()
            log.exception("activity log failed: %s %s", action, entity_id)
            return None

    def order_event(self, order, action, description, actor=None):
        return self.record(
            actor_name=getattr(actor, "name", None) or "System",
            actor_type=getattr(actor, "role", None) or "system",
            action=action,
            entity_type="order",
            entity_id=order.id,
            entity_name=order.code,
            description=description,
            branch_id=order.branch_id,
        )
