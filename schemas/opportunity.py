"""Opportunity records: scored sales opportunities attached to an event."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel, OpportunityStatus, Priority


class _OpportunityFields(CamelModel):
    event_name: str  # denormalized copy of the event's name
    estimated_value: Optional[float] = None
    match_score: float = Field(ge=0, le=100)
    recommended_product: Optional[str] = None
    notes: Optional[str] = None
    follow_up_date: Optional[str] = None
    closed_at: Optional[str] = None
    event_id: str
    contact_id: Optional[str] = None


class Opportunity(_OpportunityFields):
    id: str
    status: OpportunityStatus
    priority: Priority
    created_at: datetime
    updated_at: datetime


class OpportunityCreate(_OpportunityFields):
    status: Optional[OpportunityStatus] = None
    priority: Optional[Priority] = None


class OpportunityUpdate(CamelModel):
    event_name: Optional[str] = None
    estimated_value: Optional[float] = None
    match_score: Optional[float] = Field(default=None, ge=0, le=100)
    recommended_product: Optional[str] = None
    notes: Optional[str] = None
    follow_up_date: Optional[str] = None
    closed_at: Optional[str] = None
    event_id: Optional[str] = None
    contact_id: Optional[str] = None
    status: Optional[OpportunityStatus] = None
    priority: Optional[Priority] = None
