from .drone_state import DroneStateException, assign_drone, release_drone
from .order_state import (
    OrderStateException,
    cancel_order,
    transition_order_to_completed,
    transition_order_to_delivering,
)

__all__ = [
    "DroneStateException",
    "assign_drone",
    "release_drone",
    "OrderStateException",
    "transition_order_to_delivering",
    "transition_order_to_completed",
    "cancel_order",
]
