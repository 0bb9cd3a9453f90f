from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from src.database import get_db
from src.auth.dependencies import get_optional_user
from src.bookings.inventory_service import InventoryService, GUEST_PURCHASER
from src.chat.intent_parser import parse_intent
from src.chat.schemas import ChatMessage, ChatIntent, ChatBookingRequest, ChatBookingResponse, AvailableEventsResponse
from src.events.schemas import Event
from src.events.service import EventService
from src.models import User

router = APIRouter()

def _available_events(db: Session):
    return [Event.model_validate(e) for e in EventService.get_available_events(db)]

@router.post("/parse", response_model=ChatIntent)
def parse_booking_intent(request: ChatMessage, db: Session = Depends(get_db)):
    """Turn a chat message into a structured booking intent"""
    return parse_intent(request.message, _available_events(db))

@router.post("/confirm-booking", response_model=ChatBookingResponse)
def confirm_booking(
    request: ChatBookingRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    """Execute a booking the user confirmed in chat"""
    purchaser = current_user.email if current_user else GUEST_PURCHASER
    booking = InventoryService(db).purchase(request.event_id, request.tickets, purchaser)
    return ChatBookingResponse(
        message=f"Successfully booked {request.tickets} ticket(s) for {booking.event_name}!",
        booking=booking
    )

@router.get("/events", response_model=AvailableEventsResponse)
def get_available_events(db: Session = Depends(get_db)):
    """Events that still have tickets left"""
    events = _available_events(db)
    return AvailableEventsResponse(count=len(events), events=events)
