from sqlalchemy import select, update
from sqlalchemy.orm import Session
from loguru import logger

from src.bookings.schemas import BookingResult, ReleaseResult
from src.database import transaction
from src.exceptions import EventNotFoundError, InsufficientInventoryError, InvalidInputError
from src.models import Event, Ticket

GUEST_PURCHASER = "guest"

class InventoryService:
    """Atomic check-and-decrement (and increment) of an event's ticket counter.

    Every operation runs in one transaction scoped to a single event row: the
    counter is read under lock (``BEGIN IMMEDIATE`` on SQLite, ``FOR UPDATE``
    elsewhere), checked, changed with one conditional statement and read back
    before commit. Nothing is committed on any error path, so a concurrent
    buyer either sees the decrement or waits for it; the last ticket can only
    be sold once.
    """

    def __init__(self, db: Session):
        self.db = db

    def purchase(self, event_id: int, quantity: int = 1, purchaser_email: str = GUEST_PURCHASER) -> BookingResult:
        """Sell `quantity` tickets for an event and record the purchase"""
        self._check_quantity(quantity)

        with transaction(self.db):
            available = self._lock_available(event_id)
            if available < quantity:
                logger.info(f"Purchase rejected for event {event_id}: requested {quantity}, remaining {available}")
                raise InsufficientInventoryError(event_id, quantity, available)

            self._apply_delta(event_id, -quantity)
            event = self._reload(event_id)

            total_price = event.price * quantity
            self.db.add(Ticket(
                event_id=event.id,
                user_email=purchaser_email,
                quantity=quantity,
                total_price=total_price
            ))
            self.db.flush()

            result = BookingResult(
                event_id=event.id,
                event_name=event.name,
                event_date=event.date,
                tickets_booked=quantity,
                remaining_tickets=event.available_tickets,
                total_price=total_price
            )

        logger.info(f"Sold {quantity} ticket(s) for event {event_id} to {purchaser_email}; {result.remaining_tickets} left")
        return result

    def purchase_ticket(self, event_id: int, purchaser_email: str = GUEST_PURCHASER) -> BookingResult:
        """Single-ticket purchase for the browse-and-buy flow"""
        return self.purchase(event_id, 1, purchaser_email)

    def release(self, event_id: int, quantity: int) -> ReleaseResult:
        """Return `quantity` tickets to an event after a refund or cancellation"""
        self._check_quantity(quantity)

        with transaction(self.db):
            row = self.db.execute(
                select(Event.available_tickets, Event.total_tickets)
                .where(Event.id == event_id)
                .with_for_update()
            ).first()
            if row is None:
                raise EventNotFoundError(event_id)

            if row.available_tickets + quantity > row.total_tickets:
                raise InvalidInputError(
                    f"Cannot release {quantity} ticket(s): only {row.total_tickets - row.available_tickets} sold",
                    details={"remaining_tickets": row.available_tickets}
                )

            self._apply_delta(event_id, quantity)
            event = self._reload(event_id)

            result = ReleaseResult(
                event_id=event.id,
                event_name=event.name,
                tickets_released=quantity,
                remaining_tickets=event.available_tickets
            )

        logger.info(f"Released {quantity} ticket(s) for event {event_id}; {result.remaining_tickets} left")
        return result

    @staticmethod
    def _check_quantity(quantity: int):
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidInputError("Ticket quantity must be a positive integer")

    def _lock_available(self, event_id: int) -> int:
        available = self.db.execute(
            select(Event.available_tickets)
            .where(Event.id == event_id)
            .with_for_update()
        ).scalar_one_or_none()
        if available is None:
            raise EventNotFoundError(event_id)
        return available

    def _apply_delta(self, event_id: int, delta: int):
        result = self.db.execute(
            update(Event)
            .where(Event.id == event_id)
            .values(available_tickets=Event.available_tickets + delta)
            .execution_options(synchronize_session=False)
        )
        # Row vanished or id mismatch between the read and the write
        if result.rowcount != 1:
            raise EventNotFoundError(event_id)

    def _reload(self, event_id: int) -> Event:
        event = self.db.execute(
            select(Event)
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if event is None:
            raise EventNotFoundError(event_id)
        return event
