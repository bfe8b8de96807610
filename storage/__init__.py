#Marks storage as a package: the boundary between external data and the engine.
#Everything leaving this package is a validated Drone or Order record.

from .csv_loader import load_drones_csv, load_orders_csv
from .document_client import DocumentStoreClient, DocumentStoreError

__all__ = [
    "DocumentStoreClient",
    "DocumentStoreError",
    "load_drones_csv",
    "load_orders_csv",
]
