# laundrygo/services/notification_gateway.py
import logging
import requests
from sqlalchemy.exc import SQLAlchemyError

from ..model import Notification

log = logging.getLogger(__name__)


class NotificationGateway:
    """Stores one Notification row per message and makes a single push attempt.

    Never raises: a failed row or push is logged and reported as False.
    """

    def __init__(self, session, push_url=None, timeout=5.0):
        self.session = session
        self.push_url = push_url
        self.timeout = timeout

    @classmethod
    def from_app(cls, app, session):
        return cls(session, app.config.get("PUSH_GATEWAY_URL"), app.config.get("PUSH_TIMEOUT", 5.0))

    def send(self, draft) -> bool:
        if draft is None:
            return False
        try:
            note = Notification(
                user_id=draft.recipient_id,
                title=draft.title,
                body=draft.body,
                payload=draft.payload,
            )
            self.session.add(note)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            log.exception("notification row failed for user %s: %s", draft.recipient_id, draft.title)
            return False

        log.info("notification stored for user %s: %s", draft.recipient_id, draft.title)
        return self._push(draft)

    def _push(self, draft) -> bool:
        if not self.push_url:
            log.debug("PUSH_GATEWAY_URL not set; push skipped")
            return True
        try:
            resp = requests.post(
                self.push_url,
                json={
                    "recipient": draft.recipient_id,
                    "title": draft.title,
                    "body": draft.body,
                    "payload": draft.payload,
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            log.warning("push to user %s failed: %s", draft.recipient_id, e)
            return False
        return True
