#Purpose: The document-store "adapter/client".
#Sole responsibility: talk to the managed document database over REST and
#return normalized outputs (plain dicts, or validated Drone/Order records).
#Encapsulates store-specific details:
#endpoint/project/key headers
#URL construction (/databases/{db}/collections/{collection}/documents)
#query encoding
#timeouts and error handling
#It should not contain dispatch rules or scoring.

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from drones.models import Drone, DroneStatus
from orders.models import Order, OrderStatus

# Read store settings from environment
# Example in .env:
# APPWRITE_ENDPOINT=https://cloud.appwrite.io/v1
# APPWRITE_PROJECT_ID=...
# APPWRITE_API_KEY=...
# APPWRITE_DATABASE_ID=...
# APPWRITE_ORDERS_COLLECTION_ID=orders
# APPWRITE_DRONES_COLLECTION_ID=drones
load_dotenv()

logger = logging.getLogger(__name__)


class DocumentStoreError(Exception):
    """Raised when the document store rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def equal_query(attribute: str, value: Any) -> str:
    return json.dumps({"method": "equal", "attribute": attribute, "values": [value]})


def order_desc_query(attribute: str) -> str:
    return json.dumps({"method": "orderDesc", "attribute": attribute})


def limit_query(limit: int) -> str:
    return json.dumps({"method": "limit", "values": [limit]})


class DocumentStoreClient:
    """
    Document store Adapter / Client

    Sole responsibility:
    - Talk to the store via HTTP
    - Turn raw documents into validated records at the boundary

    """
    def __init__(
        self,
        endpoint: Optional[str] = None,
        project_id: Optional[str] = None,
        api_key: Optional[str] = None,
        database_id: Optional[str] = None,
        orders_collection_id: Optional[str] = None,
        drones_collection_id: Optional[str] = None,
        timeout: int = 10,
    ):
        self.endpoint = (endpoint or os.getenv("APPWRITE_ENDPOINT") or "").rstrip("/")
        self.project_id = project_id or os.getenv("APPWRITE_PROJECT_ID")
        self.api_key = api_key or os.getenv("APPWRITE_API_KEY")
        self.database_id = database_id or os.getenv("APPWRITE_DATABASE_ID")
        self.orders_collection_id = orders_collection_id or os.getenv("APPWRITE_ORDERS_COLLECTION_ID", "orders")
        self.drones_collection_id = drones_collection_id or os.getenv("APPWRITE_DRONES_COLLECTION_ID", "drones")
        self.timeout = timeout #seconds to wait for the store before giving up

        if not self.endpoint:
            raise ValueError("Document store endpoint not set. Please set APPWRITE_ENDPOINT in the .env file.")
        if not self.project_id or not self.database_id:
            raise ValueError("APPWRITE_PROJECT_ID and APPWRITE_DATABASE_ID must be set.")

    #----------------
    # Internal helpers
    #----------------
    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-Appwrite-Project": self.project_id,
        }
        if self.api_key:
            headers["X-Appwrite-Key"] = self.api_key
        return headers

    def _documents_url(self, collection_id: str) -> str:
        return f"{self.endpoint}/databases/{self.database_id}/collections/{collection_id}/documents"

    def _request(self, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = requests.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise DocumentStoreError(f"Document store unreachable: {exc}") from exc

        if not response.ok:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            raise DocumentStoreError(
                f"Document store error ({response.status_code}): {message}",
                status_code=response.status_code,
            )
        return response.json()

    #----------------
    # Public methods
    #----------------
    def list_documents(self, collection_id: str, queries: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """
        Returns the raw documents of a collection matching `queries`.
        """
        params = {"queries[]": queries} if queries else None
        data = self._request("GET", self._documents_url(collection_id), params=params)
        return data.get("documents", [])

    def update_document(self, collection_id: str, document_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self._documents_url(collection_id)}/{document_id}"
        return self._request("PATCH", url, json={"data": data})

    #----------------
    # Record-level helpers (boundary -> validated records)
    #----------------
    def fetch_drones(self, status: Optional[DroneStatus] = None) -> List[Drone]:
        queries = [equal_query("status", status.value)] if status else None
        documents = self.list_documents(self.drones_collection_id, queries)
        return [Drone.from_document(document) for document in documents]

    def fetch_ready_orders(self, limit: int = 100) -> List[Order]:
        documents = self.list_documents(
            self.orders_collection_id,
            [
                equal_query("status", OrderStatus.READY.value),
                order_desc_query("$createdAt"),
                limit_query(limit),
            ],
        )
        # ready orders that already carry a drone are in flight
        return [Order.from_document(document) for document in documents if not document.get("droneId")]
