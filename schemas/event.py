"""Event records: conferences and trade fairs discovered as sales leads."""
from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel, EventStatus, parse_calendar_date


class _EventFields(CamelModel):
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    industry: Optional[str] = None
    event_type: Optional[str] = None
    estimated_attendees: Optional[int] = Field(default=None, ge=0)
    source_url: str
    source_platform: Optional[str] = None
    logo_url: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _calendar_date(cls, value):
        return parse_calendar_date(value)


class Event(_EventFields):
    id: str
    status: EventStatus
    scraped_at: datetime
    created_at: datetime
    updated_at: datetime


class EventCreate(_EventFields):
    status: Optional[EventStatus] = None


class EventUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    industry: Optional[str] = None
    event_type: Optional[str] = None
    estimated_attendees: Optional[int] = Field(default=None, ge=0)
    source_url: Optional[str] = None
    source_platform: Optional[str] = None
    logo_url: Optional[str] = None
    status: Optional[EventStatus] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _calendar_date(cls, value):
        return parse_calendar_date(value)
