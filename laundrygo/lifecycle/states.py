"""
Order lifecycle vocabulary.

Fulfilment methods, item statuses and the per-method status sequences.
An ``OrderStatus`` always pairs a method with a status that belongs to that
method's sequence, so a pickup order can never be "out_for_delivery" and a
dropoff order can never be "waiting_for_pickup".
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple


class Method(str, Enum):
    DROPOFF = "dropoff"
    PICKUP = "pickup"
    DELIVERY = "delivery"

    @property
    def label(self) -> str:
        return _METHOD_LABELS[self]

    @classmethod
    def parse(cls, value) -> "Method":
        """Accept a Method or its string code (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"method must be one of: {choices}")


_METHOD_LABELS = {
    Method.DROPOFF: "Drop-off",
    Method.PICKUP: "Pickup & Return",
    Method.DELIVERY: "Delivery",
}


class ItemStatus(str, Enum):
    WAITING_FOR_PICKUP = "waiting_for_pickup"
    COLLECTED = "collected"
    IN_PROGRESS = "in_progress"
    READY_FOR_DELIVERY = "ready_for_delivery"
    OUT_FOR_DELIVERY = "out_for_delivery"
    COMPLETED = "completed"


# Full ordered sequence per method, including courier-driven steps.
METHOD_SEQUENCES: Dict[Method, Tuple[ItemStatus, ...]] = {
    Method.DROPOFF: (
        ItemStatus.IN_PROGRESS,
        ItemStatus.COMPLETED,
    ),
    Method.PICKUP: (
        ItemStatus.WAITING_FOR_PICKUP,
        ItemStatus.COLLECTED,
        ItemStatus.IN_PROGRESS,
        ItemStatus.READY_FOR_DELIVERY,
        ItemStatus.COMPLETED,
    ),
    Method.DELIVERY: (
        ItemStatus.IN_PROGRESS,
        ItemStatus.READY_FOR_DELIVERY,
        ItemStatus.OUT_FOR_DELIVERY,
        ItemStatus.COMPLETED,
    ),
}

# Statuses shown in the active-work queue.
ACTIVE_STATUSES: FrozenSet[ItemStatus] = frozenset([
    ItemStatus.IN_PROGRESS,
    ItemStatus.READY_FOR_DELIVERY,
    ItemStatus.OUT_FOR_DELIVERY,
])

TERMINAL_STATUS = ItemStatus.COMPLETED

# Status an item enters when its weight is recorded.
WEIGHED_STATUS = ItemStatus.IN_PROGRESS

# Status a pickup placeholder must have before it can be weighed.
PICKUP_WEIGHABLE_STATUS = ItemStatus.COLLECTED


class InvalidStatus(ValueError):
    """Raised when a status does not belong to the method's sequence."""


@dataclass(frozen=True)
class OrderStatus:
    """A (method, status) pair that is valid by construction."""
    method: Method
    state: ItemStatus

    def __post_init__(self):
        if self.state not in METHOD_SEQUENCES[self.method]:
            raise InvalidStatus(f"{self.state.value} is not a {self.method.value} status")

    @classmethod
    def of(cls, method, state) -> "OrderStatus":
        m = Method.parse(method)
        try:
            s = state if isinstance(state, ItemStatus) else ItemStatus(state)
        except ValueError:
            raise InvalidStatus(f"unknown status: {state}")
        return cls(m, s)

    @property
    def is_terminal(self) -> bool:
        return self.state is TERMINAL_STATUS


class Stage(str, Enum):
    """The bucket an order occupies."""
    INTAKE = "intake"
    ACTIVE = "active"
    ARCHIVED = "archived"


def stage_of(status: Optional[OrderStatus], weighed: bool, archived: bool = False) -> Stage:
    """Derive the bucket from the item status (None when there is no item).

    An order with an archive row is archived whatever rows linger behind it.
    """
    if archived:
        return Stage.ARCHIVED
    if status is None:
        return Stage.INTAKE
    if status.is_terminal:
        return Stage.ARCHIVED
    if status.state in ACTIVE_STATUSES and weighed:
        return Stage.ACTIVE
    return Stage.INTAKE


def awaiting_courier(status: Optional[OrderStatus]) -> bool:
    """True while a pickup placeholder has not been collected from the customer."""
    return (
        status is not None
        and status.method is Method.PICKUP
        and status.state is ItemStatus.WAITING_FOR_PICKUP
    )
