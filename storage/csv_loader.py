"""
Purpose: Load a drone fleet and an order backlog from CSV files.
What it does:
Reads sample/offline data with pandas and turns every row into a validated
Drone or Order, so simulations use exactly the records the store boundary would.

drones.csv columns:
  drone_id, status, battery_level, lat, lon, max_payload, current_payload, max_range, max_speed
orders.csv columns:
  order_id, restaurant_id, restaurant_lat, restaurant_lon, delivery_lat, delivery_lon, total, created_at
"""

from __future__ import annotations

from typing import List, Optional

import pandas as pd

from drones.models import Drone
from orders.models import Order, parse_timestamp


def _optional_float(value) -> Optional[float]:
    if pd.isna(value):
        return None
    return float(value)


def load_drones_csv(path: str) -> List[Drone]:
    df = pd.read_csv(path)

    drones = []
    for _, row in df.iterrows():
        drones.append(
            Drone.new(
                drone_id=str(row["drone_id"]),
                status=str(row["status"]),
                battery_level=float(row["battery_level"]),
                lat=_optional_float(row.get("lat")),
                lon=_optional_float(row.get("lon")),
                max_payload=float(row["max_payload"]),
                current_payload=_optional_float(row.get("current_payload")) or 0.0,
                max_range=float(row["max_range"]),
                max_speed=float(row["max_speed"]),
            )
        )
    return drones


def load_orders_csv(path: str, limit: Optional[int] = None) -> List[Order]:
    df = pd.read_csv(path)
    if limit is not None:
        df = df.head(limit)

    orders = []
    for _, row in df.iterrows():
        order_id = str(row["order_id"])
        orders.append(
            Order.new(
                order_id=order_id,
                restaurant_id=str(row["restaurant_id"]),
                delivery_lat=float(row["delivery_lat"]),
                delivery_lon=float(row["delivery_lon"]),
                total=float(row["total"]),
                created_at=parse_timestamp(order_id, row["created_at"]),
                restaurant_lat=_optional_float(row.get("restaurant_lat")),
                restaurant_lon=_optional_float(row.get("restaurant_lon")),
            )
        )
    return orders
