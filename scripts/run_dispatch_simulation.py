import argparse
import csv
import logging
import os
from datetime import datetime, timezone

from dispatch.dispatcher import Dispatcher
from dispatch.selection import rank_drones
from drones.policy import policy_from_env
from orders.priority import order_priority
from orders.queue import DispatchQueue
from storage.csv_loader import load_drones_csv, load_orders_csv


class PrintingFlightSimulator:
    """
    Stand-in for the real-time flight animation: just reports the route it would fly.
    """
    def start_delivery(self, order, drone, restaurant_location):
        start = drone.home_location or drone.location or restaurant_location
        print(
            f"  [FLIGHT] {drone.id}: ({start[0]:.4f}, {start[1]:.4f}) -> "
            f"restaurant ({restaurant_location[0]:.4f}, {restaurant_location[1]:.4f}) -> "
            f"customer ({order.delivery_location[0]:.4f}, {order.delivery_location[1]:.4f})"
        )


def run_simulation(now: datetime):
    print("=== STARTING DRONE DISPATCH SIMULATION ===")

    # Resolve the correct path depending on where the user runs the script from.
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    # 1. Load Data
    drones = load_drones_csv(os.path.join(base_dir, "sampledata/drones.csv"))
    orders = load_orders_csv(os.path.join(base_dir, "sampledata/orders.csv"))
    print(f"Loaded {len(orders)} Orders and {len(drones)} Drones.\n")

    # 2. Configure System
    policy = policy_from_env()
    queue = DispatchQueue(thresholds=policy.urgency_thresholds_minutes)
    for order in orders:
        queue.enqueue(order)

    print("--- Pending Orders (dispatch order) ---")
    for order in queue.pending_orders(now):
        priority = order_priority(order.created_at, now, policy.urgency_thresholds_minutes)
        print(f"{order.id}: {priority.level.value:<6} waiting {priority.waiting_minutes} min, total {order.total:,.0f}")

    dispatcher = Dispatcher(queue, flight_simulator=PrintingFlightSimulator(), policy=policy)

    # operator view for the most urgent order
    head = queue.next_order(now)
    if head:
        restaurant_lat, restaurant_lon = dispatcher.restaurant_location(head)
        print(f"\n--- Drone ranking for {head.id} ---")
        for candidate in rank_drones(head, drones, restaurant_lat, restaurant_lon, policy):
            print(
                f"{candidate.drone.id} ({candidate.drone.status.value}): score {candidate.score:.2f}, "
                f"{candidate.distance:.2f} km, eta {candidate.eta} min"
            )

    # 3. Dispatch one pass
    print("\n--- Dispatch Pass ---")
    outcomes = dispatcher.dispatch_pending(drones, now)

    output_path = os.path.join(base_dir, "dispatch_results.csv")
    with open(output_path, "w", newline='') as file:
        writer = csv.writer(file)
        writer.writerow(["order_id", "drone_id", "score", "distance_km", "eta_min"])

        for outcome in outcomes:
            if outcome.assigned:
                score = outcome.drone_score
                writer.writerow([outcome.order.id, outcome.drone.id, round(score.score, 2), round(score.distance, 3), score.eta])
                print(f"[SUCCESS] {outcome.order.id} -> {outcome.drone.id} (score {score.score:.2f}, eta {score.eta} min)")
            else:
                writer.writerow([outcome.order.id, "NONE", "", "", ""])
                print(f"[WAITING] {outcome.order.id} -> no dispatchable drone")

    assigned = sum(1 for outcome in outcomes if outcome.assigned)
    print("\n=== SIMULATION COMPLETE ===")
    print(f"Orders Dispatched: {assigned} / {len(orders)}")
    print(f"Orders Still Queued: {len(queue)}")
    print(f"Results written to '{output_path}'.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run one drone dispatch pass over the sample data.")
    parser.add_argument("--now", help="ISO timestamp to evaluate waiting times at", default="2026-10-18T12:05:00+00:00")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    run_simulation(datetime.fromisoformat(args.now).astimezone(timezone.utc))
