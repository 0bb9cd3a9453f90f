from pydantic import BaseModel, Field, validator
from typing import List, Optional
from decimal import Decimal
import datetime as dt

def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Event name must be a non-empty string")
    return v

def _check_not_past(v: dt.date) -> dt.date:
    if v < dt.date.today():
        raise ValueError("Event date cannot be in the past")
    return v

class EventBase(BaseModel):
    name: str
    date: dt.date
    description: str = ""
    location: str = ""
    category: str = "General"
    price: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)

class EventCreate(EventBase):
    total_tickets: int = Field(..., gt=0)

    @validator("name")
    def validate_name(cls, v):
        return _clean_name(v)

    @validator("date")
    def validate_date(cls, v):
        return _check_not_past(v)

    @validator("description", "location")
    def strip_text(cls, v):
        return v.strip()

    @validator("category")
    def default_category(cls, v):
        return v.strip() or "General"

class EventUpdate(BaseModel):
    """Metadata edits; ticket counts only move through the inventory service"""
    name: Optional[str] = None
    date: Optional[dt.date] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)

    @validator("name")
    def validate_name(cls, v):
        return _clean_name(v) if v is not None else v

    @validator("date")
    def validate_date(cls, v):
        return _check_not_past(v) if v is not None else v

    @validator("description", "location", "category")
    def strip_text(cls, v):
        return v.strip() if v is not None else v

class Event(EventBase):
    id: int
    total_tickets: int
    available_tickets: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True

class EventListResponse(BaseModel):
    success: bool = True
    data: List[Event]
    count: int

class EventDetailResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    event: Event

class TicketReleaseRequest(BaseModel):
    quantity: int = Field(..., gt=0)
