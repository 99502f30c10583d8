"""
Customer notification rules.

Decides whether a lifecycle event is visible to the customer and, if so,
builds the message. Delivery of the message belongs to the notification
gateway.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..utils.money import format_peso, to_float
from .states import ItemStatus, Method, OrderStatus


@dataclass(frozen=True)
class NotificationDraft:
    recipient_id: int
    title: str
    body: str
    payload: dict = field(default_factory=dict)


_COMPLETED_BODY = {
    Method.DROPOFF: "Your laundry is done and ready to pick up in shop.",
    Method.PICKUP: "Your laundry has been returned to you. Thank you!",
    Method.DELIVERY: "Your laundry has been delivered to you. Thank you!",
}


def _base_payload(order, item, status: OrderStatus) -> dict:
    return {
        "order_id": order.id,
        "item_id": item.id if item is not None else None,
        "method": status.method.value,
        "status": status.state.value,
        "weight": to_float(item.quantity) if item is not None else None,
        "total": to_float(item.subtotal) if item is not None else None,
    }


def confirmation_for(order, item) -> Optional[NotificationDraft]:
    """Weight recorded: tell the customer what they will pay."""
    if order.customer_id is None:
        return None
    status = OrderStatus.of(order.method, item.status)
    return NotificationDraft(
        recipient_id=order.customer_id,
        title="Order Confirmed",
        body=(
            f"{order.code} weighed at {to_float(item.quantity):g} kg. "
            f"Total: {format_peso(item.subtotal)}."
        ),
        payload=_base_payload(order, item, status),
    )


def notification_for(order, item, previous: OrderStatus, current: OrderStatus) -> Optional[NotificationDraft]:
    """Message for an advance from ``previous`` to ``current``, or None."""
    if previous == current or order.customer_id is None:
        return None

    payload = _base_payload(order, item, current)
    state, method = current.state, current.method

    if state is ItemStatus.READY_FOR_DELIVERY and method is Method.PICKUP:
        title = "Ready for Return"
        body = f"{order.code} is clean and will be returned to you soon."
    elif state is ItemStatus.READY_FOR_DELIVERY and method is Method.DELIVERY:
        title = "Ready for Delivery"
        body = f"{order.code} is clean and waiting for a driver."
    elif state is ItemStatus.OUT_FOR_DELIVERY and method is Method.DELIVERY:
        title = "Order is Being Delivered"
        body = f"{order.code} is on its way to you."
        payload["delivery_location"] = order.delivery_location()
    elif state is ItemStatus.COMPLETED:
        title = "Order Completed"
        body = f"{order.code}: {_COMPLETED_BODY[method]}"
    else:
        return None

    return NotificationDraft(
        recipient_id=order.customer_id,
        title=title,
        body=body,
        payload=payload,
    )
