"""
Drones domain package.

Public API:
- Domain models: Drone, DroneStatus, InvalidDroneError
- Tunables: DispatchPolicy, default_dispatch_policy, policy_from_env
"""
from .models import Drone, DroneStatus, InvalidDroneError
from .policy import DispatchPolicy, default_dispatch_policy, policy_from_env

__all__ = [
    "Drone",
    "DroneStatus",
    "InvalidDroneError",
    "DispatchPolicy",
    "default_dispatch_policy",
    "policy_from_env",
]
