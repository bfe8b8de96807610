from orders.models import Order, OrderStatus

# statuses an order may be dispatched from
DISPATCHABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY)


class OrderStateException(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


def transition_order_to_delivering(order: Order, drone_id: str) -> Order:
    """
    Called when a drone is assigned. The order leaves the "ready" list.
    """
    if order.status not in DISPATCHABLE_STATUSES:
        raise OrderStateException(f"Cannot dispatch order {order.id} from {order.status.value}")

    order.status = OrderStatus.DELIVERING
    order.drone_id = drone_id
    return order


def transition_order_to_completed(order: Order) -> Order:
    if order.status != OrderStatus.DELIVERING:
        raise OrderStateException(f"Order {order.id} is not DELIVERING. Current: {order.status.value}")
    order.status = OrderStatus.COMPLETED
    return order


def cancel_order(order: Order) -> Order:
    """
    Completed orders stay completed; anything else can be cancelled.
    """
    if order.status == OrderStatus.COMPLETED:
        raise OrderStateException(f"Order {order.id} is already completed")
    order.status = OrderStatus.CANCELLED
    return order
