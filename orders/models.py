"""
Purpose: Domain models for the Orders capability.
What it does:
- Defines core data structures:
- Order (id, restaurant reference, delivery coords, total, created_at, status)
- OrderPriority (urgency level + waiting minutes, recomputed on every pass)

Defines enums/constants:
- OrderStatus = PENDING | PREPARING | READY | DELIVERING | COMPLETED | CANCELLED
- PriorityLevel = LOW | MEDIUM | HIGH | URGENT

Converts loosely typed store documents into validated Orders (Order.from_document),
so the scoring math always receives well-typed numeric fields.
created_at is always timezone-aware; naive values are read as UTC.

Rule: No distance math, no selection logic. Models only.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

LatLon = Tuple[float, float]


class InvalidOrderError(ValueError):
    """Raised when an order record is malformed."""
    pass


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERING = "delivering"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PriorityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


@dataclass(frozen=True)
class OrderPriority:
    """
    Urgency of an order at a given instant. Never stored on the Order.
    """
    level: PriorityLevel
    waiting_minutes: int


@dataclass
class Order:
    """
    A placed purchase awaiting drone delivery.
    """

    id: str
    restaurant_id: str
    delivery_location: LatLon
    total: float
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # resolved from the restaurant reference when the store embeds it
    restaurant_location: Optional[LatLon] = None

    status: OrderStatus = OrderStatus.READY
    drone_id: Optional[str] = None

    def __post_init__(self):
        self.delivery_location = _coerce_location(self.id, "delivery_location", self.delivery_location)
        if self.restaurant_location is not None:
            self.restaurant_location = _coerce_location(self.id, "restaurant_location", self.restaurant_location)

        if not _is_number(self.total):
            raise InvalidOrderError(f"Order {self.id}: total must be numeric, got {self.total!r}")
        if self.total < 0:
            raise InvalidOrderError(f"Order {self.id}: total must be >= 0, got {self.total}")
        self.total = float(self.total)

        if not isinstance(self.created_at, datetime):
            raise InvalidOrderError(f"Order {self.id}: created_at must be a datetime")
        if self.created_at.tzinfo is None:
            # naive timestamps are taken as UTC so waiting times compare against aware clocks
            self.created_at = self.created_at.replace(tzinfo=timezone.utc)

        if not isinstance(self.status, OrderStatus):
            try:
                self.status = OrderStatus(self.status)
            except ValueError as exc:
                raise InvalidOrderError(f"Order {self.id}: unknown status {self.status!r}") from exc

    @classmethod
    def new(
        cls,
        order_id: str,
        restaurant_id: str,
        delivery_lat: float,
        delivery_lon: float,
        total: float,
        created_at: datetime | None = None,
        restaurant_lat: float | None = None,
        restaurant_lon: float | None = None,
        status: str | OrderStatus = OrderStatus.READY,
    ) -> Order:
        restaurant_location = None
        if restaurant_lat is not None and restaurant_lon is not None:
            restaurant_location = (restaurant_lat, restaurant_lon)

        return cls(
            id=order_id,
            restaurant_id=restaurant_id,
            delivery_location=(delivery_lat, delivery_lon),
            total=total,
            created_at=created_at or datetime.now(timezone.utc),
            restaurant_location=restaurant_location,
            status=status,
        )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> Order:
        """
        Build an Order from a document-store record.

        `restaurantId` is either a plain id or the expanded restaurant
        document carrying its own latitude/longitude.
        """
        order_id = document.get("$id")
        if not order_id:
            raise InvalidOrderError("Order document has no $id")

        restaurant = document.get("restaurantId")
        restaurant_location = None
        if isinstance(restaurant, dict):
            restaurant_id = restaurant.get("$id", "")
            lat, lon = restaurant.get("latitude"), restaurant.get("longitude")
            if lat is not None and lon is not None:
                restaurant_location = (lat, lon)
        else:
            restaurant_id = restaurant or ""

        lat, lon = document.get("deliveryLatitude"), document.get("deliveryLongitude")
        if lat is None or lon is None:
            raise InvalidOrderError(f"Order {order_id}: missing delivery coordinates")

        created_raw = document.get("$createdAt") or document.get("createdAt")
        if not created_raw:
            raise InvalidOrderError(f"Order {order_id}: missing creation timestamp")

        return cls(
            id=order_id,
            restaurant_id=str(restaurant_id),
            delivery_location=(lat, lon),
            total=document.get("total", 0),
            created_at=parse_timestamp(order_id, created_raw),
            restaurant_location=restaurant_location,
            status=document.get("status", OrderStatus.READY.value),
            drone_id=document.get("droneId"),
        )


def parse_timestamp(order_id: str, value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        # store timestamps are ISO-8601 with a trailing Z
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise InvalidOrderError(f"Order {order_id}: bad timestamp {value!r}") from exc


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _coerce_location(order_id: str, name: str, value: Any) -> LatLon:
    try:
        lat, lon = value
    except (TypeError, ValueError) as exc:
        raise InvalidOrderError(f"Order {order_id}: {name} must be a (lat, lon) pair") from exc
    if not (_is_number(lat) and _is_number(lon)):
        raise InvalidOrderError(f"Order {order_id}: {name} must be numeric, got {value!r}")
    return (float(lat), float(lon))
