from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from typing import Optional

from src.database import get_db
from src.auth.dependencies import get_optional_user
from src.bookings.schemas import PurchaseRequest, BookingResponse
from src.bookings.inventory_service import InventoryService, GUEST_PURCHASER
from src.events.schemas import Event, EventListResponse
from src.events.service import EventService
from src.models import User

router = APIRouter()

@router.get("", response_model=EventListResponse)
def list_events(db: Session = Depends(get_db)):
    """All events for the browse page"""
    events = EventService.get_events(db)
    return EventListResponse(
        data=[Event.model_validate(e) for e in events],
        count=len(events)
    )

@router.post("/{event_id}/purchase", response_model=BookingResponse)
def purchase_tickets(
    event_id: int = Path(..., description="Event to buy tickets for"),
    request: Optional[PurchaseRequest] = None,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Buy tickets for an event (one unless a quantity is given)"""
    purchaser = current_user.email if current_user else GUEST_PURCHASER
    service = InventoryService(db)

    if request is None:
        booking = service.purchase_ticket(event_id, purchaser)
    else:
        booking = service.purchase(event_id, request.quantity, purchaser)

    return BookingResponse(
        message=f"Successfully booked {booking.tickets_booked} ticket(s) for {booking.event_name}",
        booking=booking
    )
