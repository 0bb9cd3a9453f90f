#!/usr/bin/env python3

import os
from datetime import date, timedelta
from decimal import Decimal

from loguru import logger

from src.database import SessionLocal, init_db
from src.logger_config import setup_logging
from src.models import Event, Ticket, User
from src.auth.roles import UserRole
from src.auth.utils import get_password_hash

ADMIN_EMAIL = os.environ.get("SEED_ADMIN_EMAIL", "admin@clemson.edu")
ADMIN_PASSWORD = os.environ.get("SEED_ADMIN_PASSWORD", "Admin12345")

def _upcoming(days: int) -> date:
    return date.today() + timedelta(days=days)

SAMPLE_EVENTS = [
    {"name": "Clemson vs. South Carolina", "days": 30, "location": "Memorial Stadium", "category": "Sports", "total_tickets": 300, "price": Decimal("45.00")},
    {"name": "Jazz Night at Brooks Center", "days": 12, "location": "Brooks Center", "category": "Music", "total_tickets": 150, "price": Decimal("15.00")},
    {"name": "Spring Career Fair", "days": 45, "location": "Littlejohn Coliseum", "category": "Career", "total_tickets": 500, "price": Decimal("0.00")},
    {"name": "Tiger Theatre: Hamlet", "days": 20, "location": "Brooks Center", "category": "Theatre", "total_tickets": 200, "price": Decimal("20.00")},
    {"name": "Homecoming Concert", "days": 60, "location": "Bowman Field", "category": "Music", "total_tickets": 1000, "price": Decimal("25.00")},
]

def create_seed_data():
    db = SessionLocal()

    try:
        logger.info("Creating seed data for TigerTix...")

        # Clear existing data (in reverse dependency order)
        db.query(Ticket).delete()
        db.query(Event).delete()

        for sample in SAMPLE_EVENTS:
            db.add(Event(
                name=sample["name"],
                date=_upcoming(sample["days"]),
                description=f"{sample['name']} at {sample['location']}",
                location=sample["location"],
                category=sample["category"],
                total_tickets=sample["total_tickets"],
                available_tickets=sample["total_tickets"],
                price=sample["price"],
            ))

        if not db.query(User).filter(User.email == ADMIN_EMAIL).first():
            db.add(User(
                email=ADMIN_EMAIL,
                password_hash=get_password_hash(ADMIN_PASSWORD),
                first_name="System",
                last_name="Administrator",
                role=UserRole.ADMIN.value,
                is_verified=True,
            ))

        db.commit()
        logger.info(f"Seeded {len(SAMPLE_EVENTS)} events and administrator {ADMIN_EMAIL}")

    except Exception:
        logger.exception("Error creating seed data")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    setup_logging()
    init_db()
    create_seed_data()
