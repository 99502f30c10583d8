"""
Branch queue classification.

Splits a branch's orders into the display queues. Read-only: it works on
already-loaded rows and never writes, so dashboards can poll it freely.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional, Set

from .states import InvalidStatus, Method, OrderStatus, Stage, awaiting_courier, stage_of

log = logging.getLogger(__name__)


@dataclass
class BranchQueues:
    pending: list = field(default_factory=list)
    awaiting_pickup: list = field(default_factory=list)
    ongoing: list = field(default_factory=list)
    history: list = field(default_factory=list)


def _status_of(method: Method, item) -> Optional[OrderStatus]:
    if item is None:
        return None
    return OrderStatus.of(method, item.status)


def order_stage(order, archived_ids: Set[str] = frozenset()) -> Optional[Stage]:
    """Stage of ``order``, or None when its item carries a status its method never uses."""
    item = order.item
    try:
        status = _status_of(Method.parse(order.method), item)
    except InvalidStatus as e:
        log.warning("order %s left out of the queues: %s", order.id, e)
        return None
    return stage_of(
        status,
        weighed=item is not None and item.quantity is not None,
        archived=order.id in archived_ids,
    )


def _oldest_first(value: Optional[datetime]) -> datetime:
    return value or datetime.min


def classify_branch(
    orders: Iterable,
    active_items: Iterable,
    history: Iterable,
    archived_ids: Set[str] = frozenset(),
    history_limit: int = 20,
) -> BranchQueues:
    """
    orders       -- the branch's Order rows (each with ``.item`` loaded)
    active_items -- OrderItem rows in an active status, joined to the branch
    history      -- OrderHistory rows for the branch
    archived_ids -- order ids that already have an archive row
    """
    queues = BranchQueues()

    for order in orders:
        if order_stage(order, archived_ids) is not Stage.INTAKE:
            continue
        if awaiting_courier(_status_of(Method.parse(order.method), order.item)):
            queues.awaiting_pickup.append(order)
        else:
            queues.pending.append(order)

    for item in active_items:
        if item.order is None:
            continue
        if order_stage(item.order, archived_ids) is Stage.ACTIVE:
            queues.ongoing.append(item)

    queues.pending.sort(key=lambda o: _oldest_first(o.created_at))
    queues.awaiting_pickup.sort(key=lambda o: _oldest_first(o.created_at))
    queues.ongoing.sort(key=lambda i: _oldest_first(i.started_at))
    queues.history = sorted(
        history, key=lambda h: _oldest_first(h.completed_at), reverse=True
    )[:history_limit]
    return queues
