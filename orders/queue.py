"""
Purpose: Holds outstanding orders and decides which one the dispatcher serves next.
What it does:
- Owns the in-memory pending list (orders waiting for a drone)

Provides operations:
   - enqueue(order)
   - pending_orders(now)  -> urgency-sorted snapshot
   - next_order(now)
   - pop(order_id)
   - evict_cancelled(order_id)

Ordering rule (sort_by_urgency):
 - every URGENT order goes ahead of every non-urgent order
 - inside each of those two tiers, longest-waiting first
 - an URGENT order always outranks a HIGH one, whatever their waiting times

Rule: Queue owns membership and ordering, dispatch owns drone selection.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from .models import Order, PriorityLevel
from .priority import DEFAULT_URGENCY_THRESHOLDS, order_priority


def sort_by_urgency(
    orders: Iterable[Order],
    now: Optional[datetime] = None,
    thresholds: Sequence[int] = DEFAULT_URGENCY_THRESHOLDS,
) -> List[Order]:
    """
    Return a new list with the most urgent orders first.

    Two-tier key: (not urgent, -waiting_minutes). Python's sort is stable,
    so orders with equal keys keep their input order.
    """
    now = now or datetime.now(timezone.utc)

    def urgency_key(order: Order):
        priority = order_priority(order.created_at, now, thresholds)
        return (priority.level != PriorityLevel.URGENT, -priority.waiting_minutes)

    return sorted(orders, key=urgency_key)


@dataclass
class QueueStats:
    pending_count: int
    by_level: Dict[PriorityLevel, int]
    now: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class DispatchQueue:
    """
    In-memory queue of orders waiting for a drone.

    Priorities are never stored: every read recomputes them from created_at.
    """
    thresholds: Sequence[int] = DEFAULT_URGENCY_THRESHOLDS

    _orders: Dict[str, Order] = field(default_factory=dict)  # all orders by id
    _pending_ids: List[str] = field(default_factory=list)  # arrival order

    # --- Public API ---

    def enqueue(self, order: Order) -> None:
        """
        Add a new order to the pending list.
        """
        if order.id in self._pending_ids:
            #idempotency : dont double insert
            return
        self._orders[order.id] = order
        self._pending_ids.append(order.id)

    def get_order(self, order_id: str) -> Optional[Order]:
        return self._orders.get(order_id)

    def __len__(self) -> int:
        return len(self._pending_ids)

    def pending_orders(self, now: Optional[datetime] = None) -> List[Order]:
        arrivals = [self._orders[order_id] for order_id in self._pending_ids]
        return sort_by_urgency(arrivals, now, self.thresholds)

    def next_order(self, now: Optional[datetime] = None) -> Optional[Order]:
        pending = self.pending_orders(now)
        return pending[0] if pending else None

    def pop(self, order_id: str) -> Optional[Order]:
        """
        Remove an order from the pending list (it has been assigned).
        """
        if order_id not in self._pending_ids:
            return None
        self._pending_ids.remove(order_id)
        return self._orders.get(order_id)

    def evict_cancelled(self, order_id: str) -> None:
        """
        Remove an order from the pending list and mark it cancelled.
        A completed order raises OrderStateException and is left as is.
        """
        # local import: dispatch imports this module
        from dispatch.state_machines.order_state import cancel_order

        order = self._orders.get(order_id)
        if not order:
            return

        cancel_order(order)
        if order_id in self._pending_ids:
            self._pending_ids.remove(order_id)

    def stats(self, now: Optional[datetime] = None) -> QueueStats:
        now = now or datetime.now(timezone.utc)
        levels = Counter(
            order_priority(self._orders[order_id].created_at, now, self.thresholds).level
            for order_id in self._pending_ids
        )
        return QueueStats(
            pending_count=len(self._pending_ids),
            by_level={level: levels.get(level, 0) for level in PriorityLevel},
            now=now,
        )
