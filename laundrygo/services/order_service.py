# laundrygo/services/order_service.py
import logging
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import contains_eager

from ..errors import NotFound, PreconditionFailed, StoreError
from ..lifecycle import (
    ACTIVE_STATUSES,
    InvalidStatus,
    ItemStatus,
    Method,
    OrderStatus,
    TransitionResult,
    check_weighable,
    classify_branch,
    confirmation_for,
    next_status,
    notification_for,
    weighed_status,
)
from ..model import Branch, Detergent, Order, OrderHistory, OrderItem, Service, User
from ..utils.api import utcnow
from ..utils.money import D, format_peso, parse_positive, round_money
from ..utils.geo import parse_lat_lng
from .activity_logger import ActivityLogger
from .notification_gateway import NotificationGateway

log = logging.getLogger(__name__)


def _int_or_none(value, field):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise PreconditionFailed(f"{field} must be an integer")


class OrderLifecycleService:
    """
    Moves orders through intake -> active work -> history.

    The store session, notification gateway and activity logger are passed
    in; nothing is read from module globals. Every status write is a
    compare-and-set on the current status, so two racing requests cannot
    both apply the same transition.
    """

    def __init__(self, session, gateway, activity=None, history_limit=20):
        self.session = session
        self.gateway = gateway
        self.activity = activity
        self.history_limit = history_limit

    @classmethod
    def from_app(cls, app, session):
        return cls(
            session,
            NotificationGateway.from_app(app, session),
            ActivityLogger(session),
            history_limit=app.config.get("HISTORY_LIMIT", 20),
        )

    # ---- lookups -------------------------------------------------------

    def get_order(self, order_id) -> Order:
        order = self.session.get(Order, str(order_id))
        if order is None:
            raise NotFound("Order not found")
        return order

    def get_item(self, item_id) -> OrderItem:
        item = self.session.get(OrderItem, str(item_id))
        if item is None:
            raise NotFound("Order item not found")
        return item

    def branch_of_order(self, order_id) -> int:
        return self.get_order(order_id).branch_id

    def branch_of_item(self, item_id) -> int:
        return self.get_item(item_id).order.branch_id

    def _service(self, branch_id, service_id) -> Service:
        sid = _int_or_none(service_id, "service_id")
        if sid is None:
            raise PreconditionFailed("service_id is required")
        service = self.session.get(Service, sid)
        if service is None or service.branch_id != branch_id or service.is_active is False:
            raise PreconditionFailed("service is not offered by this branch")
        return service

    def _detergent(self, branch_id, detergent_id, kind):
        did = _int_or_none(detergent_id, f"{kind}_id")
        if did is None:
            return None
        row = self.session.get(Detergent, did)
        if row is None or row.branch_id != branch_id or row.kind != kind or row.is_active is False:
            raise PreconditionFailed(f"{kind} is not available at this branch")
        return row

    # ---- queues --------------------------------------------------------

    def list_branch_orders(self, branch_id):
        bid = _int_or_none(branch_id, "branch_id")
        if bid is None:
            raise PreconditionFailed("Branch ID required")

        orders = (
            self.session.query(Order)
            .filter(Order.branch_id == bid)
            .order_by(Order.created_at.asc())
            .all()
        )
        active_items = (
            self.session.query(OrderItem)
            .join(Order, OrderItem.order_id == Order.id)
            .options(contains_eager(OrderItem.order))
            .filter(
                Order.branch_id == bid,
                OrderItem.status.in_([s.value for s in ACTIVE_STATUSES]),
            )
            .order_by(OrderItem.started_at.asc())
            .all()
        )
        history = (
            self.session.query(OrderHistory)
            .filter(OrderHistory.branch_id == bid)
            .order_by(OrderHistory.completed_at.desc())
            .limit(self.history_limit)
            .all()
        )

        order_ids = [o.id for o in orders]
        archived_ids = set()
        if order_ids:
            rows = (
                self.session.query(OrderHistory.order_id)
                .filter(OrderHistory.order_id.in_(order_ids))
                .all()
            )
            archived_ids = {r[0] for r in rows}
            if archived_ids:
                log.warning("branch %s has %d archived orders still in intake", bid, len(archived_ids))

        return classify_branch(
            orders, active_items, history,
            archived_ids=archived_ids,
            history_limit=self.history_limit,
        )

    # ---- intake --------------------------------------------------------

    def create_manual_order(self, payload: dict, actor=None) -> Order:
        payload = payload or {}
        branch_id = _int_or_none(payload.get("branch_id"), "branch_id")
        if branch_id is None:
            raise PreconditionFailed("branch_id is required")
        if self.session.get(Branch, branch_id) is None:
            raise PreconditionFailed("unknown branch")

        customer_name = (payload.get("customer_name") or "").strip()
        if not customer_name:
            raise PreconditionFailed("customer_name is required")
        customer_contact = (payload.get("customer_contact") or "").strip() or None

        try:
            method = Method.parse(payload.get("method"))
        except ValueError as e:
            raise PreconditionFailed(str(e))

        service = self._service(branch_id, payload.get("service_id"))
        detergent = self._detergent(branch_id, payload.get("detergent_id"), "detergent")
        softener = self._detergent(branch_id, payload.get("softener_id"), "softener")

        lat, lng = parse_lat_lng(payload.get("delivery_lat"), payload.get("delivery_lng"))
        address = (payload.get("delivery_address") or "").strip() or None
        if method is not Method.DROPOFF and (lat is None or lng is None):
            raise PreconditionFailed("delivery coordinates are required for pickup and delivery orders")

        customer_id = _int_or_none(payload.get("customer_id"), "customer_id")
        if customer_id is not None and self.session.get(User, customer_id) is None:
            raise PreconditionFailed("unknown customer")

        order = Order(
            branch_id=branch_id,
            customer_id=customer_id,
            method=method.value,
            customer_name=customer_name,
            customer_contact=customer_contact,
            delivery_address=address if method is not Method.DROPOFF else None,
            delivery_lat=lat if method is not Method.DROPOFF else None,
            delivery_lng=lng if method is not Method.DROPOFF else None,
            service_id=service.id,
            detergent_id=detergent.id if detergent else None,
            softener_id=softener.id if softener else None,
        )
        try:
            self.session.add(order)
            self.session.flush()
            if method is Method.PICKUP:
                # placeholder tracks courier collection until the laundry is weighed
                self.session.add(OrderItem(
                    order_id=order.id,
                    service_id=service.id,
                    status=ItemStatus.WAITING_FOR_PICKUP.value,
                ))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            log.exception("create order failed for branch %s", branch_id)
            raise StoreError("Failed to create order")

        log.info("order %s created (%s) at branch %s", order.id, method.value, branch_id)
        self._activity(order, "order_created", f"New {method.label} order for {customer_name}", actor)
        return order

    # ---- weighing ------------------------------------------------------

    def record_weight(self, order_id, weight, service_id=None, price_per_unit=None, actor=None) -> OrderItem:
        try:
            # kg kept to two places so subtotal matches what is stored
            qty = round_money(parse_positive(weight, "weight"))
            price = None
            if price_per_unit not in (None, ""):
                price = round_money(parse_positive(price_per_unit, "price_per_unit"))
        except ValueError as e:
            raise PreconditionFailed(str(e))
        if qty <= 0:
            raise PreconditionFailed("weight must be > 0")

        order = self.get_order(order_id)
        method = Method.parse(order.method)
        service = self._service(order.branch_id, service_id if service_id not in (None, "") else order.service_id)
        if price is None:
            price = round_money(D(service.price_per_kg))
        subtotal = round_money(qty * price)

        item = order.item
        try:
            placeholder = OrderStatus.of(method, item.status) if item is not None else None
        except InvalidStatus as e:
            raise PreconditionFailed(str(e))
        check_weighable(method, placeholder, weighed=item is not None and item.weighed)

        now = utcnow()
        values = dict(
            service_id=service.id,
            quantity=qty,
            price_per_unit=price,
            subtotal=subtotal,
            status=weighed_status(method).state.value,
            started_at=now,
            updated_at=now,
        )
        try:
            if method is Method.PICKUP:
                res = self.session.execute(
                    update(OrderItem)
                    .where(
                        OrderItem.id == item.id,
                        OrderItem.status == ItemStatus.COLLECTED.value,
                        OrderItem.quantity.is_(None),
                    )
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                if res.rowcount != 1:
                    self.session.rollback()
                    raise PreconditionFailed("order has already been weighed")
                item_id = item.id
            else:
                item = OrderItem(order_id=order.id, **values)
                self.session.add(item)
                self.session.flush()
                item_id = item.id
            self.session.commit()
        except IntegrityError:
            # unique order_id: another request weighed this order first
            self.session.rollback()
            raise PreconditionFailed("order has already been weighed")
        except SQLAlchemyError:
            self.session.rollback()
            log.exception("record weight failed for order %s", order_id)
            raise StoreError("Failed to record weight")

        self.session.expire_all()
        item = self.session.get(OrderItem, item_id)
        log.info("order %s weighed: %s kg x %s = %s", order.id, qty, price, subtotal)

        self._notify(confirmation_for(order, item))
        self._activity(order, "order_weighed", f"{qty} kg {service.name} for {format_peso(subtotal)}", actor)
        return item

    # ---- status --------------------------------------------------------

    def advance_status(self, item_id, actor=None) -> TransitionResult:
        item = self.get_item(item_id)
        order = item.order
        item_id, order_id = item.id, order.id
        try:
            current = OrderStatus.of(order.method, item.status)
        except InvalidStatus as e:
            raise PreconditionFailed(str(e))

        if current.is_terminal:
            # archived; cleanup just has not removed the row yet
            raise NotFound("Order item not found")

        nxt = next_status(current)
        if nxt == current:
            log.info("advance on item %s at %s is a no-op", item_id, current.state.value)
            return TransitionResult(item_id, order_id, current, current)
        if not item.weighed:
            raise PreconditionFailed("order has not been weighed yet")

        now = utcnow()
        values = {"status": nxt.state.value, "updated_at": now}
        snapshot = None
        if nxt.is_terminal:
            values["completed_at"] = now
            snapshot = self._history_snapshot(order, item, now)

        try:
            res = self.session.execute(
                update(OrderItem)
                .where(OrderItem.id == item_id, OrderItem.status == current.state.value)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if res.rowcount != 1:
                self.session.rollback()
                return self._lost_race(item_id, order_id)
            if snapshot is not None:
                self.session.add(snapshot)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            log.exception("status write failed for item %s (%s -> %s)", item_id, current.state.value, nxt.state.value)
            raise StoreError("Failed to complete order" if nxt.is_terminal else "Failed to update order status")

        log.info("item %s: %s -> %s", item_id, current.state.value, nxt.state.value)

        self.session.expire_all()
        order = self.session.get(Order, order_id)
        item = self.session.get(OrderItem, item_id)
        self._notify(notification_for(order, item, current, nxt))

        if nxt.is_terminal:
            self._activity(order, "order_completed", f"{order.code} completed and archived", actor)
            self._cleanup(item_id, order_id)
        else:
            self._activity(order, "order_status_advanced", f"{order.code} is now {nxt.state.value}", actor)

        return TransitionResult(item_id, order_id, current, nxt)

    def _lost_race(self, item_id, order_id) -> TransitionResult:
        # another request moved the row first; report where it is now
        self.session.expire_all()
        fresh = self.session.get(OrderItem, item_id)
        if fresh is None:
            raise NotFound("Order item not found")
        try:
            status = OrderStatus.of(fresh.order.method, fresh.status)
        except InvalidStatus as e:
            raise PreconditionFailed(str(e))
        if status.is_terminal:
            raise NotFound("Order item not found")
        log.info("item %s already moved to %s by another request", item_id, status.state.value)
        return TransitionResult(item_id, order_id, status, status)

    # ---- archival ------------------------------------------------------

    def _history_snapshot(self, order, item, completed_at) -> OrderHistory:
        method = Method.parse(order.method)
        service = item.service or order.service
        return OrderHistory(
            order_id=order.id,
            branch_id=order.branch_id,
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            customer_contact=order.customer_contact,
            method=method.value,
            method_label=method.label,
            service_name=service.name if service else None,
            detergent_name=order.detergent.name if order.detergent else None,
            softener_name=order.softener.name if order.softener else None,
            delivery_address=order.delivery_address,
            weight=item.quantity,
            price_per_unit=item.price_per_unit,
            price=item.subtotal,
            status=ItemStatus.COMPLETED.value,
            created_at=order.created_at,
            completed_at=completed_at,
        )

    def _cleanup(self, item_id, order_id):
        self._delete_row(OrderItem, item_id, "order item")
        self._delete_row(Order, order_id, "order")

    def _delete_row(self, model, row_id, label) -> bool:
        try:
            res = self.session.execute(delete(model).where(model.id == row_id))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            log.exception("cleanup: could not delete %s %s", label, row_id)
            return False
        if res.rowcount == 0:
            log.info("cleanup: %s %s was already removed", label, row_id)
        return True

    # ---- side effects --------------------------------------------------

    def _notify(self, draft):
        if draft is None:
            return
        try:
            self.gateway.send(draft)
        except Exception:
            log.exception("notification gateway failed: %s", draft.title)

    def _activity(self, order, action, description, actor):
        if self.activity is None:
            return
        try:
            self.activity.order_event(order, action, description, actor)
        except Exception:
            log.exception("activity log failed: %s", action)
