"""Shared pydantic configuration for persisted records."""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from dateutil.parser import isoparse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on disk and on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class EventStatus(str, Enum):
    DISCOVERED = "DISCOVERED"
    ANALYZED = "ANALYZED"
    CONTACTED = "CONTACTED"
    CLOSED = "CLOSED"


class ContactStatus(str, Enum):
    NEW = "NEW"
    VERIFIED = "VERIFIED"
    CONTACTED = "CONTACTED"
    RESPONDED = "RESPONDED"
    QUALIFIED = "QUALIFIED"
    UNRESPONSIVE = "UNRESPONSIVE"


class OpportunityStatus(str, Enum):
    NEW = "NEW"
    CONTACTED = "CONTACTED"
    QUALIFIED = "QUALIFIED"
    PROPOSAL_SENT = "PROPOSAL_SENT"
    NEGOTIATING = "NEGOTIATING"
    CLOSED_WON = "CLOSED_WON"
    CLOSED_LOST = "CLOSED_LOST"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class JobStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


def parse_calendar_date(value) -> Optional[date]:
    """Accept a date, a datetime, or ISO text; timestamps keep only their date."""
    if value is None or (isinstance(value, date) and not isinstance(value, datetime)):
        return value
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return isoparse(text).date()
    return value


def require_http_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"not an http(s) URL: {value!r}")
    return value
