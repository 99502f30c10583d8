from datetime import datetime, timedelta
from types import SimpleNamespace

from laundrygo.lifecycle.classifier import classify_branch

T0 = datetime(2025, 3, 1, 8, 0, 0)


def _order(oid, method, minutes=0, item=None):
    o = SimpleNamespace(id=oid, method=method, created_at=T0 + timedelta(minutes=minutes), item=None)
    if item is not None:
        item.order = o
        o.item = item
    return o


def _item(status, quantity=None, started=None):
    return SimpleNamespace(
        status=status,
        quantity=quantity,
        started_at=T0 + timedelta(minutes=started) if started is not None else None,
        order=None,
    )


def _history(oid, minutes):
    return SimpleNamespace(order_id=oid, completed_at=T0 + timedelta(minutes=minutes))


def _ids(rows):
    return [r.id for r in rows]


def test_orders_without_item_are_pending_for_every_method():
    orders = [_order("a", "dropoff", 2), _order("b", "pickup", 1), _order("c", "delivery", 3)]
    q = classify_branch(orders, [], [])
    assert _ids(q.pending) == ["b", "a", "c"]
    assert q.ongoing == [] and q.awaiting_pickup == []


def test_pickup_waits_for_courier_before_pending():
    waiting = _order("w", "pickup", 0, _item("waiting_for_pickup"))
    collected = _order("c", "pickup", 1, _item("collected"))
    q = classify_branch([waiting, collected], [], [])
    assert _ids(q.awaiting_pickup) == ["w"]
    assert _ids(q.pending) == ["c"]


def test_delivery_stays_pending_until_weighed():
    unweighed = _order("d", "delivery", 0, _item("in_progress"))
    q = classify_branch([unweighed], [unweighed.item], [])
    assert _ids(q.pending) == ["d"]
    assert q.ongoing == []


def test_weighed_items_are_ongoing_not_pending():
    a = _order("a", "delivery", 0, _item("out_for_delivery", 3, started=5))
    b = _order("b", "dropoff", 1, _item("in_progress", 2, started=1))
    q = classify_branch([a, b], [a.item, b.item], [])
    assert q.pending == []
    assert [i.order.id for i in q.ongoing] == ["b", "a"]


def test_archived_orders_are_hidden_from_intake_and_work():
    lingering_order = _order("x", "dropoff", 0)
    lingering_item = _order("y", "dropoff", 1, _item("in_progress", 4, started=2))
    completed_item = _order("z", "delivery", 2, _item("completed", 4, started=3))
    q = classify_branch(
        [lingering_order, lingering_item, completed_item],
        [lingering_item.item],
        [_history("x", 10), _history("y", 11), _history("z", 12)],
        archived_ids={"x", "y", "z"},
    )
    assert q.pending == [] and q.ongoing == []
    assert [h.order_id for h in q.history] == ["z", "y", "x"]


def test_history_newest_first_and_capped():
    rows = [_history(str(i), i) for i in range(30)]
    q = classify_branch([], [], rows, history_limit=20)
    assert len(q.history) == 20
    assert q.history[0].order_id == "29"
    assert q.history[-1].order_id == "10"


def test_every_order_lands_in_exactly_one_queue():
    orders = [
        _order("p1", "dropoff", 0),
        _order("p2", "pickup", 1, _item("waiting_for_pickup")),
        _order("p3", "pickup", 2, _item("collected")),
        _order("o1", "pickup", 3, _item("ready_for_delivery", 2, started=3)),
        _order("o2", "delivery", 4, _item("in_progress", 1, started=4)),
        _order("h1", "dropoff", 5),
    ]
    active = [o.item for o in orders if o.item is not None and o.item.status in (
        "in_progress", "ready_for_delivery", "out_for_delivery")]
    q = classify_branch(orders, active, [_history("h1", 9)], archived_ids={"h1"})

    buckets = (
        _ids(q.pending)
        + _ids(q.awaiting_pickup)
        + [i.order.id for i in q.ongoing]
        + [h.order_id for h in q.history]
    )
    assert sorted(buckets) == sorted(o.id for o in orders)


def test_status_outside_the_method_is_left_out():
    stray = _order("x1", "pickup", 0, _item("out_for_delivery", 2, started=0))
    fine = _order("p1", "dropoff", 1)
    q = classify_branch([stray, fine], [stray.item], [])
    assert _ids(q.pending) == ["p1"]
    assert q.awaiting_pickup == [] and q.ongoing == [] and q.history == []
