from dataclasses import replace

from drones.models import Drone, DroneStatus


class DroneStateException(Exception):
    """Raised when an invalid drone transition is attempted."""
    pass


def assign_drone(drone: Drone, order_weight: float) -> Drone:
    """
    Called once a drone has been chosen for an order.
    Loads the package onto the drone and flips it to BUSY so the next
    selection pass cannot pick it again.
    """
    if drone.status != DroneStatus.AVAILABLE:
        raise DroneStateException(f"Drone {drone.id} is {drone.status.value}, not available")

    if drone.payload_headroom < order_weight:
        raise DroneStateException(
            f"Drone {drone.id} does not have enough payload headroom. "
            f"Has {drone.payload_headroom:.2f} kg, order needs {order_weight:.2f} kg"
        )

    # Drone is a frozen dataclass, so a new instance is returned
    return replace(
        drone,
        status=DroneStatus.BUSY,
        current_payload=drone.current_payload + order_weight,
    )


def release_drone(drone: Drone, payload_kg: float) -> Drone:
    """
    Delivery finished (or aborted): unload and make the drone dispatchable again.
    """
    if drone.status != DroneStatus.BUSY:
        raise DroneStateException(f"Drone {drone.id} is {drone.status.value}, not busy")

    return replace(
        drone,
        status=DroneStatus.AVAILABLE,
        current_payload=max(drone.current_payload - payload_kg, 0.0),
    )
