from sqlalchemy.orm import Session
from loguru import logger
from typing import List

from src.models import Event
from src.events.schemas import EventCreate, EventUpdate
from src.database import transaction
from src.exceptions import EventNotFoundError, InvalidInputError

class EventService:
    @staticmethod
    def get_event_by_id(db: Session, event_id: int) -> Event:
        """Get event by ID or raise"""
        event = db.query(Event).filter(Event.id == event_id).first()
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    @staticmethod
    def get_events(db: Session) -> List[Event]:
        """All events, soonest first"""
        return db.query(Event).order_by(Event.date.asc(), Event.id.asc()).all()

    @staticmethod
    def get_available_events(db: Session) -> List[Event]:
        """Events that still have tickets left"""
        return db.query(Event).filter(
            Event.available_tickets > 0
        ).order_by(Event.date.asc(), Event.id.asc()).all()

    @staticmethod
    def create_event(db: Session, event: EventCreate) -> Event:
        """Create an event; every ticket starts out available"""
        db_event = Event(
            name=event.name,
            date=event.date,
            description=event.description,
            location=event.location,
            category=event.category,
            total_tickets=event.total_tickets,
            available_tickets=event.total_tickets,
            price=event.price,
        )

        with transaction(db):
            db.add(db_event)
            db.flush()

        logger.info(f"Event created with ID: {db_event.id}")
        return db_event

    @staticmethod
    def update_event(db: Session, event_id: int, event_update: EventUpdate) -> Event:
        """Update event metadata"""
        update_data = event_update.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            raise InvalidInputError("No valid fields to update")

        with transaction(db):
            db_event = EventService.get_event_by_id(db, event_id)
            for field, value in update_data.items():
                setattr(db_event, field, value)
            db.flush()

        logger.info(f"Event {event_id} updated: {sorted(update_data)}")
        return db_event

    @staticmethod
    def delete_event(db: Session, event_id: int) -> None:
        """Delete an event together with its ticket records"""
        with transaction(db):
            db_event = EventService.get_event_by_id(db, event_id)
            db.delete(db_event)

        logger.info(f"Event {event_id} deleted")
