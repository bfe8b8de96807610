from datetime import datetime, timedelta, timezone

import pytest

from dispatch.state_machines.order_state import OrderStateException
from orders.models import InvalidOrderError, Order, OrderStatus, PriorityLevel
from orders.priority import estimate_weight, order_priority, waiting_minutes
from orders.queue import DispatchQueue, sort_by_urgency

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_order(order_id, minutes_ago, total=100000, seconds=0):
    return Order.new(
        order_id=order_id,
        restaurant_id="RST-01",
        delivery_lat=10.77,
        delivery_lon=106.67,
        total=total,
        created_at=NOW - timedelta(minutes=minutes_ago, seconds=seconds),
    )


# --- weight ---

def test_estimate_weight_base_packaging():
    assert estimate_weight(0) == 0.5


def test_estimate_weight_grows_with_total():
    assert estimate_weight(100000) == pytest.approx(1.5)
    totals = [0, 5000, 10000, 250000, 450000, 460000, 1000000, 10**9]
    weights = [estimate_weight(total) for total in totals]
    assert weights == sorted(weights)


def test_estimate_weight_capped_at_five_kg():
    assert estimate_weight(1000000) == 5
    assert estimate_weight(10**9) == 5


# --- priority ---

@pytest.mark.parametrize(
    "minutes, level",
    [
        (0, PriorityLevel.LOW),
        (9, PriorityLevel.LOW),
        (10, PriorityLevel.MEDIUM),
        (19, PriorityLevel.MEDIUM),
        (20, PriorityLevel.HIGH),
        (29, PriorityLevel.HIGH),
        (30, PriorityLevel.URGENT),
        (240, PriorityLevel.URGENT),
    ],
)
def test_priority_boundaries(minutes, level):
    priority = order_priority(NOW - timedelta(minutes=minutes), NOW)
    assert priority.level == level
    assert priority.waiting_minutes == minutes


def test_waiting_minutes_floor_partial_minutes():
    # 9 minutes 59 seconds is still 9 whole minutes, so still LOW
    created = NOW - timedelta(minutes=9, seconds=59)
    assert waiting_minutes(created, NOW) == 9
    assert order_priority(created, NOW).level == PriorityLevel.LOW


def test_priority_custom_thresholds():
    priority = order_priority(NOW - timedelta(minutes=6), NOW, thresholds=(2, 4, 6))
    assert priority.level == PriorityLevel.URGENT


# --- sorting ---

def test_urgent_order_sorts_before_newer_bigger_order():
    old_small = make_order("old", 35, total=50000)
    new_big = make_order("new", 5, total=900000)

    ordered = sort_by_urgency([new_big, old_small], NOW)

    assert [order.id for order in ordered] == ["old", "new"]


def test_urgent_tier_ordered_by_waiting_time():
    orders = [make_order("u31", 31), make_order("u45", 45), make_order("h25", 25), make_order("l3", 3)]

    ordered = sort_by_urgency(orders, NOW)

    assert [order.id for order in ordered] == ["u45", "u31", "h25", "l3"]


def test_non_urgent_tier_ordered_by_waiting_time():
    orders = [make_order("l1", 1), make_order("m15", 15), make_order("h22", 22)]
    assert [o.id for o in sort_by_urgency(orders, NOW)] == ["h22", "m15", "l1"]


def test_sort_is_stable_for_equal_waiting_minutes():
    orders = [make_order("a", 12, seconds=10), make_order("b", 12), make_order("c", 12, seconds=50)]
    assert [o.id for o in sort_by_urgency(orders, NOW)] == ["a", "b", "c"]


def test_sort_does_not_modify_input():
    orders = [make_order("new", 1), make_order("old", 40)]
    sort_by_urgency(orders, NOW)
    assert [o.id for o in orders] == ["new", "old"]


# --- queue ---

def test_queue_enqueue_is_idempotent():
    queue = DispatchQueue()
    order = make_order("o1", 3)
    queue.enqueue(order)
    queue.enqueue(order)
    assert len(queue) == 1


def test_queue_serves_most_urgent_first():
    queue = DispatchQueue()
    for order in [make_order("fresh", 2), make_order("stale", 33), make_order("mid", 14)]:
        queue.enqueue(order)

    assert queue.next_order(NOW).id == "stale"
    assert [o.id for o in queue.pending_orders(NOW)] == ["stale", "mid", "fresh"]


def test_queue_pop_and_evict():
    queue = DispatchQueue()
    first, second = make_order("o1", 5), make_order("o2", 6)
    queue.enqueue(first)
    queue.enqueue(second)

    assert queue.pop("o1") is first
    assert queue.pop("o1") is None

    queue.evict_cancelled("o2")
    assert second.status == OrderStatus.CANCELLED
    assert len(queue) == 0
    assert queue.next_order(NOW) is None


def test_queue_stats_counts_levels():
    queue = DispatchQueue()
    for order in [make_order("a", 1), make_order("b", 12), make_order("c", 31), make_order("d", 45)]:
        queue.enqueue(order)

    stats = queue.stats(NOW)

    assert stats.pending_count == 4
    assert stats.by_level[PriorityLevel.LOW] == 1
    assert stats.by_level[PriorityLevel.MEDIUM] == 1
    assert stats.by_level[PriorityLevel.HIGH] == 0
    assert stats.by_level[PriorityLevel.URGENT] == 2


# --- models ---

def test_order_rejects_negative_total():
    with pytest.raises(InvalidOrderError):
        make_order("bad", 1, total=-1)


def test_order_rejects_non_numeric_coordinates():
    with pytest.raises(InvalidOrderError):
        Order(id="bad", restaurant_id="r", delivery_location=("10.7", None), total=1)


def test_order_from_document_with_expanded_restaurant():
    order = Order.from_document({
        "$id": "ord_1",
        "restaurantId": {"$id": "rst_1", "latitude": 10.76, "longitude": 106.66},
        "deliveryLatitude": 10.78,
        "deliveryLongitude": 106.69,
        "total": 185000,
        "$createdAt": "2026-10-18T11:30:00.000+00:00",
        "status": "ready",
    })

    assert order.restaurant_id == "rst_1"
    assert order.restaurant_location == (10.76, 106.66)
    assert order.delivery_location == (10.78, 106.69)
    assert order.status == OrderStatus.READY
    assert order_priority(order.created_at, NOW).level == PriorityLevel.URGENT


def test_order_from_document_plain_restaurant_id_and_z_timestamp():
    order = Order.from_document({
        "$id": "ord_2",
        "restaurantId": "rst_9",
        "deliveryLatitude": 10.78,
        "deliveryLongitude": 106.69,
        "total": 1000,
        "$createdAt": "2026-10-18T11:55:00Z",
    })

    assert order.restaurant_id == "rst_9"
    assert order.restaurant_location is None
    assert waiting_minutes(order.created_at, NOW) == 5


def test_order_from_document_requires_delivery_coordinates():
    with pytest.raises(InvalidOrderError):
        Order.from_document({"$id": "ord_3", "total": 10, "$createdAt": "2026-10-18T11:55:00Z"})


def test_naive_created_at_is_read_as_utc():
    order = Order.new("naive", "RST-01", 10.77, 106.67, total=1000, created_at=datetime(2026, 10, 18, 11, 0))
    assert order.created_at == datetime(2026, 10, 18, 11, 0, tzinfo=timezone.utc)

    # sorting without an explicit clock compares against an aware "now"
    wall_clock = datetime.now(timezone.utc)
    stale = Order.new("stale", "RST-01", 10.77, 106.67, total=1000,
                      created_at=wall_clock.replace(tzinfo=None) - timedelta(minutes=45))
    fresh = Order.new("fresh", "RST-01", 10.77, 106.67, total=1000,
                      created_at=wall_clock - timedelta(minutes=3))

    assert [o.id for o in sort_by_urgency([fresh, stale])] == ["stale", "fresh"]


def test_order_from_document_timestamp_without_offset():
    order = Order.from_document({
        "$id": "ord_4",
        "restaurantId": "rst_9",
        "deliveryLatitude": 10.78,
        "deliveryLongitude": 106.69,
        "total": 1000,
        "$createdAt": "2026-10-18T11:40:00",
    })

    assert order.created_at.tzinfo is not None
    assert waiting_minutes(order.created_at, NOW) == 20

    queue = DispatchQueue()
    queue.enqueue(order)
    # stats without an explicit clock must not trip over the parsed timestamp
    assert queue.stats().pending_count == 1


def test_evict_cancelled_refuses_completed_order():
    queue = DispatchQueue()
    order = make_order("done", 5)
    queue.enqueue(order)
    order.status = OrderStatus.COMPLETED

    with pytest.raises(OrderStateException):
        queue.evict_cancelled("done")

    assert order.status == OrderStatus.COMPLETED
    assert len(queue) == 1
