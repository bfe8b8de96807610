"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Takes the most urgent pending order from the DispatchQueue, drops drones that
cannot carry it (payload headroom, round-trip battery), asks the selector
for the best of the rest, applies the assignment (drone BUSY, order DELIVERING),
persists it through the document store when one is injected, and hands the
delivery to the flight simulator.

External collaborators are injected, never module-level singletons:
- store_client: anything with update_document(collection_id, document_id, data)
  plus orders_collection_id / drones_collection_id (storage.DocumentStoreClient)
- flight_simulator: anything with start_delivery(order, drone, restaurant_location)

The dispatcher does not lock. Two dispatchers sharing a fleet can pick the
same drone; the caller owns that discipline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from drones.models import Drone, DroneStatus
from drones.policy import DispatchPolicy, default_dispatch_policy
from orders.models import LatLon, Order, OrderStatus
from orders.priority import estimate_weight
from orders.queue import DispatchQueue
from storage.document_client import DocumentStoreError

from .scoring import DroneScore, score_breakdown
from .selection import rank_drones, select_best_drone
from .state_machines.drone_state import DroneStateException, assign_drone
from .state_machines.order_state import (
    DISPATCHABLE_STATUSES,
    OrderStateException,
    transition_order_to_delivering,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchOutcome:
    """
    Result of one dispatch attempt. `drone_score` is None when no drone qualified.
    `drone` is the post-assignment (BUSY) record.
    """
    order: Order
    drone_score: Optional[DroneScore]
    drone: Optional[Drone] = None
    manual: bool = False

    @property
    def assigned(self) -> bool:
        return self.drone is not None


class Dispatcher:
    """
    Coordinates handing a queued Order to the best Drone.
    """
    def __init__(
        self,
        queue: DispatchQueue,
        store_client=None,
        flight_simulator=None,
        policy: Optional[DispatchPolicy] = None,
    ):
        self.queue = queue
        self.store_client = store_client
        self.flight_simulator = flight_simulator
        self.policy = policy or default_dispatch_policy()

        # the queue ranks orders; both must agree on when an order turns urgent
        if tuple(queue.thresholds) != tuple(self.policy.urgency_thresholds_minutes):
            raise ValueError(
                f"Queue urgency thresholds {list(queue.thresholds)} do not match "
                f"policy thresholds {list(self.policy.urgency_thresholds_minutes)}"
            )

    def restaurant_location(self, order: Order) -> LatLon:
        return order.restaurant_location or self.policy.default_restaurant_location

    def dispatch_next(self, drones: Sequence[Drone], now: Optional[datetime] = None) -> Optional[DispatchOutcome]:
        """
        Try to assign the most urgent pending order. Returns None when the queue is empty.
        An order with no dispatchable drone stays queued.
        """
        order = self.queue.next_order(now)
        if order is None:
            return None
        return self._dispatch_order(order, drones, now)

    def dispatch_pending(self, drones: Sequence[Drone], now: Optional[datetime] = None) -> List[DispatchOutcome]:
        """
        One scheduling pass: every pending order once, most urgent first.

        Assigned drones are carried forward as BUSY so no drone is picked twice
        in the same pass. Orders without a candidate stay queued for the next pass.
        """
        now = now or datetime.now(timezone.utc)
        pool: List[Drone] = list(drones)
        outcomes: List[DispatchOutcome] = []

        for order in self.queue.pending_orders(now):
            if not any(drone.status == DroneStatus.AVAILABLE for drone in pool):
                logger.info("No available drones left; %d orders wait for the next pass", len(self.queue))
                break

            outcome = self._dispatch_order(order, pool, now)
            outcomes.append(outcome)

            if outcome.assigned:
                pool = [outcome.drone if drone.id == outcome.drone.id else drone for drone in pool]

        return outcomes

    def assign_manually(
        self,
        order_id: str,
        drone_id: str,
        drones: Sequence[Drone],
        now: Optional[datetime] = None,
    ) -> DispatchOutcome:
        """
        Operator override: assign a specific drone, skipping the automatic choice.
        The drone must still be available and able to carry the order.
        """
        order = self.queue.get_order(order_id)
        if order is None:
            raise OrderStateException(f"Order {order_id} is not queued")

        by_id: Dict[str, Drone] = {drone.id: drone for drone in drones}
        if drone_id not in by_id:
            raise DroneStateException(f"Drone {drone_id} is not in the pool")

        restaurant_lat, restaurant_lon = self.restaurant_location(order)
        ranked = rank_drones(order, [by_id[drone_id]], restaurant_lat, restaurant_lon, self.policy)
        return self._commit(order, ranked[0], now, manual=True)

    # --- internals ---

    def _capable_drones(
        self,
        order: Order,
        drones: Sequence[Drone],
        restaurant_lat: float,
        restaurant_lon: float,
    ) -> List[Drone]:
        """
        Drones that can actually fly this order: enough payload headroom and
        enough battery for the round trip with the safety margin.
        """
        capable = []
        for drone in drones:
            breakdown = score_breakdown(drone, order, restaurant_lat, restaurant_lon, self.policy)
            if breakdown.payload_ok and breakdown.battery_ok:
                capable.append(drone)
            elif drone.status == DroneStatus.AVAILABLE:
                logger.debug(
                    "Order %s: skipping drone %s (payload ok=%s, battery ok=%s)",
                    order.id, drone.id, breakdown.payload_ok, breakdown.battery_ok,
                )
        return capable

    def _dispatch_order(self, order: Order, drones: Sequence[Drone], now: Optional[datetime]) -> DispatchOutcome:
        restaurant_lat, restaurant_lon = self.restaurant_location(order)
        capable = self._capable_drones(order, drones, restaurant_lat, restaurant_lon)
        best = select_best_drone(order, capable, restaurant_lat, restaurant_lon, self.policy)

        if best is None:
            logger.info("Order %s: no drone available, leaving it queued", order.id)
            return DispatchOutcome(order=order, drone_score=None)

        return self._commit(order, best, now)

    def _commit(
        self,
        order: Order,
        drone_score: DroneScore,
        now: Optional[datetime],
        manual: bool = False,
    ) -> DispatchOutcome:
        if order.status not in DISPATCHABLE_STATUSES:
            raise OrderStateException(f"Cannot dispatch order {order.id} from {order.status.value}")

        # raises before anything is written if the drone cannot take the order
        busy_drone = assign_drone(drone_score.drone, estimate_weight(order.total))

        self._persist(order, busy_drone, now or datetime.now(timezone.utc))

        transition_order_to_delivering(order, busy_drone.id)
        self.queue.pop(order.id)

        logger.info(
            "Order %s -> drone %s (%s, score %.2f, eta %d min)",
            order.id, busy_drone.id, "manual" if manual else "auto", drone_score.score, drone_score.eta,
        )

        if self.flight_simulator:
            self.flight_simulator.start_delivery(order, busy_drone, self.restaurant_location(order))

        return DispatchOutcome(order=order, drone_score=drone_score, drone=busy_drone, manual=manual)

    def _persist(self, order: Order, drone: Drone, assigned_at: datetime) -> None:
        """
        Order first: if it fails nothing has changed and the error propagates.
        A failed drone update after that is logged only, the order is already out.
        """
        if not self.store_client:
            return

        try:
            self.store_client.update_document(
                self.store_client.orders_collection_id,
                order.id,
                {"droneId": drone.id, "status": OrderStatus.DELIVERING.value, "assignedAt": assigned_at.isoformat()},
            )
        except DocumentStoreError:
            logger.error("Order %s: failed to record assignment to drone %s", order.id, drone.id)
            raise

        try:
            self.store_client.update_document(
                self.store_client.drones_collection_id,
                drone.id,
                {"status": drone.status.value, "currentPayload": drone.current_payload},
            )
        except DocumentStoreError as exc:
            logger.warning("Drone %s: status update failed after order %s was assigned: %s", drone.id, order.id, exc)
