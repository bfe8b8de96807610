"""
Purpose: Core data models for the drone fleet.
What it does:
Defines the structure of a Drone and its status as a validated, immutable record.
The dispatch engine only ever reads these; state changes produce new records.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

LatLon = Tuple[float, float]


class InvalidDroneError(ValueError):
    """Raised when a drone record is malformed."""
    pass


class DroneStatus(str, Enum):
    """
    Only AVAILABLE drones are dispatchable.
    """
    AVAILABLE = "available"
    BUSY = "busy"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"


@dataclass(frozen=True)
class Drone:
    """
    A stateless snapshot of a delivery drone at a specific point in time.

    Units: battery 0-100 %, payloads in kg, range in km, speed in km/h.
    A missing `location` means the drone is assumed to be at the restaurant.
    """
    id: str
    code: str
    name: str
    status: DroneStatus
    battery_level: float

    max_payload: float
    current_payload: float
    max_range: float
    max_speed: float

    location: Optional[LatLon] = None
    home_location: Optional[LatLon] = None

    def __post_init__(self):
        if not isinstance(self.status, DroneStatus):
            try:
                object.__setattr__(self, "status", DroneStatus(self.status))
            except ValueError as exc:
                raise InvalidDroneError(f"Drone {self.id}: unknown status {self.status!r}") from exc

        for name in ("battery_level", "max_payload", "current_payload", "max_range", "max_speed"):
            value = getattr(self, name)
            if not _is_number(value):
                raise InvalidDroneError(f"Drone {self.id}: {name} must be numeric, got {value!r}")
            object.__setattr__(self, name, float(value))

        if not 0 <= self.battery_level <= 100:
            raise InvalidDroneError(f"Drone {self.id}: battery_level must be within 0-100, got {self.battery_level}")
        if self.max_payload <= 0:
            raise InvalidDroneError(f"Drone {self.id}: max_payload must be > 0")
        if self.current_payload < 0:
            raise InvalidDroneError(f"Drone {self.id}: current_payload must be >= 0")
        if self.max_range < 0:
            raise InvalidDroneError(f"Drone {self.id}: max_range must be >= 0")
        # ETA divides by speed
        if self.max_speed <= 0:
            raise InvalidDroneError(f"Drone {self.id}: max_speed must be > 0")

        object.__setattr__(self, "location", _coerce_location(self.id, "location", self.location))
        object.__setattr__(self, "home_location", _coerce_location(self.id, "home_location", self.home_location))

    @property
    def payload_headroom(self) -> float:
        return self.max_payload - self.current_payload

    @classmethod
    def new(
        cls,
        drone_id: str,
        battery_level: float,
        status: str | DroneStatus = DroneStatus.AVAILABLE,
        lat: float | None = None,
        lon: float | None = None,
        max_payload: float = 5.0,
        current_payload: float = 0.0,
        max_range: float = 20.0,
        max_speed: float = 50.0,
        code: str | None = None,
        name: str | None = None,
        home_lat: float | None = None,
        home_lon: float | None = None,
    ) -> Drone:
        location = (lat, lon) if lat is not None and lon is not None else None
        home_location = (home_lat, home_lon) if home_lat is not None and home_lon is not None else None

        return cls(
            id=drone_id,
            code=code or drone_id,
            name=name or drone_id,
            status=status,
            battery_level=battery_level,
            max_payload=max_payload,
            current_payload=current_payload,
            max_range=max_range,
            max_speed=max_speed,
            location=location,
            home_location=home_location,
        )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> Drone:
        """
        Build a Drone from a document-store record (camelCase fields).
        """
        drone_id = document.get("$id")
        if not drone_id:
            raise InvalidDroneError("Drone document has no $id")

        missing = [
            key for key in ("status", "batteryLevel", "maxPayload", "maxRange", "maxSpeed")
            if document.get(key) is None
        ]
        if missing:
            raise InvalidDroneError(f"Drone {drone_id}: missing fields {missing}")

        return cls.new(
            drone_id=drone_id,
            code=document.get("code"),
            name=document.get("name"),
            status=document["status"],
            battery_level=document["batteryLevel"],
            lat=document.get("currentLatitude"),
            lon=document.get("currentLongitude"),
            max_payload=document["maxPayload"],
            current_payload=document.get("currentPayload") or 0.0,
            max_range=document["maxRange"],
            max_speed=document["maxSpeed"],
            home_lat=document.get("homeLatitude"),
            home_lon=document.get("homeLongitude"),
        )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _coerce_location(drone_id: str, name: str, value: Any) -> Optional[LatLon]:
    if value is None:
        return None
    try:
        lat, lon = value
    except (TypeError, ValueError) as exc:
        raise InvalidDroneError(f"Drone {drone_id}: {name} must be a (lat, lon) pair") from exc
    if not (_is_number(lat) and _is_number(lon)):
        raise InvalidDroneError(f"Drone {drone_id}: {name} must be numeric, got {value!r}")
    return (float(lat), float(lon))
