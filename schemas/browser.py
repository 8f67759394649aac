"""Shapes exchanged with the browser-driven event extraction."""
from typing import Optional

from .base import CamelModel


class ExtractedEvent(CamelModel):
    name: str
    description: Optional[str] = None
    start_date: str
    end_date: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    website: Optional[str] = None


class SaveEventsResult(CamelModel):
    success: bool
    saved_count: int
    filtered_count: int
    message: str
