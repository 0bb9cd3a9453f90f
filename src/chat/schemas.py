from pydantic import BaseModel, Field, validator
from typing import List, Optional
from enum import Enum

from src.bookings.schemas import BookingResult
from src.events.schemas import Event

class Intent(str, Enum):
    """Intents the chat assistant understands"""
    GREETING = "greeting"
    SHOW_EVENTS = "show_events"
    BOOK_TICKETS = "book_tickets"
    OTHER = "other"

class ChatMessage(BaseModel):
    message: str

    @validator("message")
    def validate_message(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Message is required and must be a non-empty string")
        return v

class ChatIntent(BaseModel):
    success: bool = True
    intent: Intent
    message: str
    event_name: Optional[str] = None
    event_id: Optional[int] = None
    tickets: Optional[int] = None
    needs_confirmation: bool = False
    events: Optional[List[Event]] = None

class ChatBookingRequest(BaseModel):
    event_id: int = Field(..., gt=0)
    tickets: int = Field(..., gt=0)

class ChatBookingResponse(BaseModel):
    success: bool = True
    message: str
    booking: BookingResult

class AvailableEventsResponse(BaseModel):
    success: bool = True
    count: int
    events: List[Event]
