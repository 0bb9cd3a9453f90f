"""
Booking & Ticketing Module

Ticket inventory for TigerTix events. It includes:

- inventory_service.py: atomic check-and-decrement on purchase and the
  matching increment on refund/cancellation
- router.py: public browse and purchase endpoints
- schemas.py: Pydantic models for purchase requests and booking results

A purchase runs as one transaction against a single event row, so concurrent
buyers can never oversell an event.
"""

from .inventory_service import InventoryService
from .schemas import PurchaseRequest, BookingResult, ReleaseResult

__all__ = [
    "InventoryService",
    "PurchaseRequest",
    "BookingResult",
    "ReleaseResult",
]
