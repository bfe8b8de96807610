"""
Orders domain package.

Public API:
- Domain models: Order, OrderStatus, OrderPriority, PriorityLevel
- Estimates: estimate_weight, order_priority
- Queue: DispatchQueue, sort_by_urgency
"""
from .models import InvalidOrderError, Order, OrderPriority, OrderStatus, PriorityLevel
from .priority import estimate_weight, order_priority
from .queue import DispatchQueue, QueueStats, sort_by_urgency

__all__ = ["Order",
           "OrderStatus",
             "OrderPriority",
               "PriorityLevel",
               "InvalidOrderError",
               "estimate_weight",
               "order_priority",
               "DispatchQueue",
               "QueueStats",
               "sort_by_urgency",
               ]
