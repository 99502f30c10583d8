import pytest

from laundrygo.errors import PreconditionFailed
from laundrygo.lifecycle.states import (
    ItemStatus,
    InvalidStatus,
    Method,
    OrderStatus,
    Stage,
    awaiting_courier,
    stage_of,
)
from laundrygo.lifecycle.transitions import (
    check_weighable,
    next_status,
    weighed_status,
)


def _walk(method):
    status = weighed_status(method)
    seen = [status.state]
    while not status.is_terminal:
        status = next_status(status)
        seen.append(status.state)
    return seen


@pytest.mark.parametrize("method,steps", [
    (Method.DROPOFF, 1),
    (Method.PICKUP, 2),
    (Method.DELIVERY, 3),
])
def test_advances_from_in_progress_to_completed(method, steps):
    status = OrderStatus(method, ItemStatus.IN_PROGRESS)
    taken = 0
    while not status.is_terminal:
        status = next_status(status)
        taken += 1
    assert taken == steps


def test_sequences_per_method():
    assert _walk(Method.DROPOFF) == [ItemStatus.IN_PROGRESS, ItemStatus.COMPLETED]
    assert _walk(Method.PICKUP) == [
        ItemStatus.IN_PROGRESS, ItemStatus.READY_FOR_DELIVERY, ItemStatus.COMPLETED,
    ]
    assert _walk(Method.DELIVERY) == [
        ItemStatus.IN_PROGRESS, ItemStatus.READY_FOR_DELIVERY,
        ItemStatus.OUT_FOR_DELIVERY, ItemStatus.COMPLETED,
    ]


def test_pickup_never_goes_out_for_delivery():
    assert ItemStatus.OUT_FOR_DELIVERY not in _walk(Method.PICKUP)
    with pytest.raises(InvalidStatus):
        OrderStatus(Method.PICKUP, ItemStatus.OUT_FOR_DELIVERY)


@pytest.mark.parametrize("method,state", [
    (Method.DROPOFF, ItemStatus.WAITING_FOR_PICKUP),
    (Method.DROPOFF, ItemStatus.READY_FOR_DELIVERY),
    (Method.DELIVERY, ItemStatus.COLLECTED),
])
def test_invalid_pairs_are_rejected(method, state):
    with pytest.raises(InvalidStatus):
        OrderStatus(method, state)


def test_of_parses_strings():
    s = OrderStatus.of("Delivery", "out_for_delivery")
    assert s == OrderStatus(Method.DELIVERY, ItemStatus.OUT_FOR_DELIVERY)
    with pytest.raises(InvalidStatus):
        OrderStatus.of("delivery", "done")
    with pytest.raises(ValueError):
        OrderStatus.of("courier", "completed")


@pytest.mark.parametrize("method,state", [
    (Method.PICKUP, ItemStatus.WAITING_FOR_PICKUP),
    (Method.PICKUP, ItemStatus.COLLECTED),
    (Method.PICKUP, ItemStatus.COMPLETED),
    (Method.DROPOFF, ItemStatus.COMPLETED),
    (Method.DELIVERY, ItemStatus.COMPLETED),
])
def test_advance_from_non_source_is_noop(method, state):
    status = OrderStatus(method, state)
    assert next_status(status) == status
    assert next_status(next_status(status)) == status


def test_pickup_weighing_requires_collection():
    waiting = OrderStatus(Method.PICKUP, ItemStatus.WAITING_FOR_PICKUP)
    with pytest.raises(PreconditionFailed, match="not yet collected"):
        check_weighable(Method.PICKUP, waiting, weighed=False)

    collected = OrderStatus(Method.PICKUP, ItemStatus.COLLECTED)
    check_weighable(Method.PICKUP, collected, weighed=False)

    with pytest.raises(PreconditionFailed):
        check_weighable(Method.PICKUP, None, weighed=False)
    with pytest.raises(PreconditionFailed, match="already been weighed"):
        check_weighable(Method.PICKUP, OrderStatus(Method.PICKUP, ItemStatus.IN_PROGRESS), weighed=True)


@pytest.mark.parametrize("method", [Method.DROPOFF, Method.DELIVERY])
def test_weighing_is_one_time_for_dropoff_and_delivery(method):
    check_weighable(method, None, weighed=False)
    with pytest.raises(PreconditionFailed, match="already been weighed"):
        check_weighable(method, OrderStatus(method, ItemStatus.IN_PROGRESS), weighed=True)


def test_stage_of():
    assert stage_of(None, weighed=False) is Stage.INTAKE
    assert stage_of(OrderStatus(Method.PICKUP, ItemStatus.COLLECTED), weighed=False) is Stage.INTAKE
    assert stage_of(OrderStatus(Method.DELIVERY, ItemStatus.IN_PROGRESS), weighed=False) is Stage.INTAKE
    assert stage_of(OrderStatus(Method.DELIVERY, ItemStatus.OUT_FOR_DELIVERY), weighed=True) is Stage.ACTIVE
    assert stage_of(OrderStatus(Method.DROPOFF, ItemStatus.COMPLETED), weighed=True) is Stage.ARCHIVED
    assert stage_of(None, weighed=False, archived=True) is Stage.ARCHIVED


def test_awaiting_courier():
    assert awaiting_courier(OrderStatus(Method.PICKUP, ItemStatus.WAITING_FOR_PICKUP))
    assert not awaiting_courier(OrderStatus(Method.PICKUP, ItemStatus.COLLECTED))
    assert not awaiting_courier(None)


def test_method_parse_and_labels():
    assert Method.parse(" PICKUP ") is Method.PICKUP
    assert Method.DROPOFF.label == "Drop-off"
    with pytest.raises(ValueError, match="method must be one of"):
        Method.parse("drone")
