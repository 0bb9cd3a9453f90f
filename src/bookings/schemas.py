from pydantic import BaseModel, Field
from datetime import date
from decimal import Decimal

class PurchaseRequest(BaseModel):
    """Body of a direct purchase; quantity defaults to a single ticket"""
    quantity: int = Field(1, gt=0)

class BookingResult(BaseModel):
    """Outcome of a committed purchase"""
    event_id: int
    event_name: str
    event_date: date
    tickets_booked: int
    remaining_tickets: int
    total_price: Decimal

class ReleaseResult(BaseModel):
    """Outcome of a committed refund/cancellation"""
    event_id: int
    event_name: str
    tickets_released: int
    remaining_tickets: int

class BookingResponse(BaseModel):
    success: bool = True
    message: str
    booking: BookingResult

class ReleaseResponse(BaseModel):
    success: bool = True
    message: str
    release: ReleaseResult
