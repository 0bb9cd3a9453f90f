from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.database import get_db
from src.auth.dependencies import require_roles
from src.auth.roles import EVENT_MANAGER_ROLES
from src.bookings.inventory_service import InventoryService
from src.bookings.schemas import ReleaseResponse
from src.events.schemas import (
    Event, EventCreate, EventUpdate, EventListResponse, EventDetailResponse, TicketReleaseRequest
)
from src.events.service import EventService
from src.auth.schemas import MessageResponse

router = APIRouter(dependencies=[Depends(require_roles(*EVENT_MANAGER_ROLES))])

@router.post("", response_model=EventDetailResponse, status_code=status.HTTP_201_CREATED)
def create_event(event: EventCreate, db: Session = Depends(get_db)):
    """Create a new event"""
    db_event = EventService.create_event(db, event)
    return EventDetailResponse(message="Event created successfully", event=Event.model_validate(db_event))

@router.get("", response_model=EventListResponse)
def list_events(db: Session = Depends(get_db)):
    """List every event"""
    events = EventService.get_events(db)
    return EventListResponse(data=[Event.model_validate(e) for e in events], count=len(events))

@router.get("/{event_id}", response_model=EventDetailResponse)
def get_event(event_id: int, db: Session = Depends(get_db)):
    """Get a single event"""
    return EventDetailResponse(event=Event.model_validate(EventService.get_event_by_id(db, event_id)))

@router.put("/{event_id}", response_model=EventDetailResponse)
def update_event(event_id: int, event_update: EventUpdate, db: Session = Depends(get_db)):
    """Edit event metadata"""
    db_event = EventService.update_event(db, event_id, event_update)
    return EventDetailResponse(message="Event updated successfully", event=Event.model_validate(db_event))

@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(event_id: int, db: Session = Depends(get_db)):
    """Delete an event and its ticket records"""
    EventService.delete_event(db, event_id)
    return MessageResponse(message=f"Event {event_id} deleted successfully")

@router.post("/{event_id}/release", response_model=ReleaseResponse)
def release_tickets(event_id: int, request: TicketReleaseRequest, db: Session = Depends(get_db)):
    """Return refunded or cancelled tickets to inventory"""
    result = InventoryService(db).release(event_id, request.quantity)
    return ReleaseResponse(message=f"Released {result.tickets_released} ticket(s)", release=result)
