"""Contact records: people reached out to about an event."""
from datetime import datetime
from typing import Optional

from .base import CamelModel, ContactStatus


class _ContactFields(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    source: Optional[str] = None
    event_id: Optional[str] = None  # weak reference, never checked


class Contact(_ContactFields):
    id: str
    verified: bool
    status: ContactStatus
    created_at: datetime
    updated_at: datetime


class ContactCreate(_ContactFields):
    verified: Optional[bool] = None
    status: Optional[ContactStatus] = None


class ContactUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    source: Optional[str] = None
    event_id: Optional[str] = None
    verified: Optional[bool] = None
    status: Optional[ContactStatus] = None
