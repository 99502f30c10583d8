from decimal import Decimal
from types import SimpleNamespace

import pytest

from laundrygo.lifecycle.notifications import confirmation_for, notification_for
from laundrygo.lifecycle.states import ItemStatus, Method, OrderStatus


def _order(method, customer_id=7):
    return SimpleNamespace(
        id="0f8e2c1a-1111-2222-3333-444455556666",
        code="Order #0F8E2C1A",
        method=method,
        customer_id=customer_id,
        delivery_location=lambda: {"address": "7 Mabini St", "lat": 14.6, "lng": 121.0},
    )


def _item(status="in_progress"):
    return SimpleNamespace(id="item-1", status=status, quantity=Decimal("5.00"), subtotal=Decimal("150.00"))


def _st(method, state):
    return OrderStatus(Method(method), ItemStatus(state))


def test_confirmation_carries_weight_and_total():
    draft = confirmation_for(_order("dropoff"), _item())
    assert draft.title == "Order Confirmed"
    assert draft.recipient_id == 7
    assert "5 kg" in draft.body
    assert "₱150.00" in draft.body
    assert draft.payload["total"] == 150.0
    assert draft.payload["weight"] == 5.0


def test_walk_in_orders_get_no_notifications():
    order = _order("dropoff", customer_id=None)
    assert confirmation_for(order, _item()) is None
    assert notification_for(order, _item(), _st("dropoff", "in_progress"), _st("dropoff", "completed")) is None


@pytest.mark.parametrize("method,title", [
    ("pickup", "Ready for Return"),
    ("delivery", "Ready for Delivery"),
])
def test_ready_titles_depend_on_method(method, title):
    draft = notification_for(_order(method), _item(), _st(method, "in_progress"), _st(method, "ready_for_delivery"))
    assert draft.title == title


def test_out_for_delivery_includes_location():
    draft = notification_for(
        _order("delivery"), _item(),
        _st("delivery", "ready_for_delivery"), _st("delivery", "out_for_delivery"),
    )
    assert draft.title == "Order is Being Delivered"
    assert draft.payload["delivery_location"]["address"] == "7 Mabini St"


@pytest.mark.parametrize("method,prev,phrase", [
    ("dropoff", "in_progress", "pick up in shop"),
    ("pickup", "ready_for_delivery", "returned to you"),
    ("delivery", "out_for_delivery", "delivered to you"),
])
def test_completed_wording(method, prev, phrase):
    draft = notification_for(_order(method), _item(), _st(method, prev), _st(method, "completed"))
    assert draft.title == "Order Completed"
    assert phrase in draft.body
    assert draft.payload["status"] == "completed"


def test_internal_and_noop_transitions_are_silent():
    order = _order("pickup")
    same = _st("pickup", "ready_for_delivery")
    assert notification_for(order, _item(), same, same) is None
    assert notification_for(order, _item(), _st("pickup", "waiting_for_pickup"), _st("pickup", "collected")) is None
    assert notification_for(order, _item(), _st("pickup", "collected"), _st("pickup", "in_progress")) is None
