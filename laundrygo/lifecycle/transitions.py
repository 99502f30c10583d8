"""
Status advance rules.

``next_status`` is total over every valid ``OrderStatus``: a status that is
not an engine-driven source advances to itself, so a retried request is a
harmless no-op instead of an error.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..errors import PreconditionFailed
from .states import (
    ItemStatus,
    Method,
    OrderStatus,
    PICKUP_WEIGHABLE_STATUS,
    WEIGHED_STATUS,
)


# (method, current) -> next, for the steps the shop itself performs.
# Courier steps (waiting_for_pickup -> collected) are recorded elsewhere.
ENGINE_TRANSITIONS: Dict[Tuple[Method, ItemStatus], ItemStatus] = {
    (Method.DROPOFF, ItemStatus.IN_PROGRESS): ItemStatus.COMPLETED,

    (Method.PICKUP, ItemStatus.IN_PROGRESS): ItemStatus.READY_FOR_DELIVERY,
    (Method.PICKUP, ItemStatus.READY_FOR_DELIVERY): ItemStatus.COMPLETED,

    (Method.DELIVERY, ItemStatus.IN_PROGRESS): ItemStatus.READY_FOR_DELIVERY,
    (Method.DELIVERY, ItemStatus.READY_FOR_DELIVERY): ItemStatus.OUT_FOR_DELIVERY,
    (Method.DELIVERY, ItemStatus.OUT_FOR_DELIVERY): ItemStatus.COMPLETED,
}


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of one advance request."""
    item_id: str
    order_id: str
    previous: OrderStatus
    current: OrderStatus

    @property
    def changed(self) -> bool:
        return self.previous != self.current

    @property
    def archived(self) -> bool:
        return self.changed and self.current.is_terminal

    def as_api(self):
        return {
            "item_id": self.item_id,
            "order_id": self.order_id,
            "method": self.current.method.value,
            "previous_status": self.previous.state.value,
            "status": self.current.state.value,
            "changed": self.changed,
            "archived": self.archived,
        }


def next_status(status: OrderStatus) -> OrderStatus:
    nxt: Optional[ItemStatus] = ENGINE_TRANSITIONS.get((status.method, status.state))
    if nxt is None:
        return status
    return OrderStatus(status.method, nxt)


def check_weighable(method: Method, placeholder: Optional[OrderStatus], weighed: bool) -> None:
    """Raise PreconditionFailed unless the order may have its weight recorded now.

    ``placeholder`` is the current item status, or None when no item exists.
    """
    if method is Method.PICKUP:
        if placeholder is None:
            raise PreconditionFailed("pickup order has no pickup record")
        if weighed or placeholder.state is not PICKUP_WEIGHABLE_STATUS:
            if placeholder.state is ItemStatus.WAITING_FOR_PICKUP:
                raise PreconditionFailed("Order not yet collected by courier")
            raise PreconditionFailed("order has already been weighed")
        return
    if placeholder is not None:
        raise PreconditionFailed("order has already been weighed")


def weighed_status(method: Method) -> OrderStatus:
    return OrderStatus(method, WEIGHED_STATUS)
