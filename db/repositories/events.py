"""Event repository: source/country lookups, date windows and statistics."""
import logging
from collections import Counter
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Union

from db.codec import blank_to_none, nullable_aliases, to_int
from db.store import RecordKind, RecordStore
from schemas import Event, EventCreate, EventStatistics, EventStatus, EventUpdate
from schemas.base import parse_calendar_date

logger = logging.getLogger(__name__)

FIELDS = (
    "id", "name", "description", "website", "startDate", "endDate",
    "location", "city", "country", "industry", "eventType",
    "estimatedAttendees", "sourceUrl", "sourcePlatform", "logoUrl",
    "status", "scrapedAt", "createdAt", "updatedAt",
)
_NULLABLE = nullable_aliases(Event)


def _decode_row(row: dict) -> Event:
    blank_to_none(row, _NULLABLE)
    row["estimatedAttendees"] = to_int(row.get("estimatedAttendees"))
    return Event.model_validate(row)


def _make_new(data: EventCreate, record_id: str, now: datetime) -> Event:
    return Event(
        **data.model_dump(exclude={"status"}),
        id=record_id,
        status=data.status or EventStatus.DISCOVERED,
        scraped_at=now,
        created_at=now,
        updated_at=now,
    )


EVENTS = RecordKind(
    name="event",
    file_name="events.csv",
    fields=FIELDS,
    model=Event,
    create_schema=EventCreate,
    update_schema=EventUpdate,
    decode_row=_decode_row,
    make_new=_make_new,
    id_prefix="evt",
)


def open_store(data_dir: Union[str, Path]) -> RecordStore[Event]:
    return RecordStore(EVENTS, data_dir)


async def find_by_source_url(store: RecordStore[Event], source_url: str) -> Optional[Event]:
    """Return the first event scraped from this URL, or None."""
    for event in await store.find_all():
        if event.source_url == source_url:
            return event
    return None


async def find_by_country(store: RecordStore[Event], country: str) -> list[Event]:
    """Return events whose country matches, ignoring case."""
    wanted = country.lower()
    return [e for e in await store.find_all() if e.country and e.country.lower() == wanted]


async def find_upcoming(
    store: RecordStore[Event], today: Optional[date] = None
) -> list[Event]:
    """Return events starting today or later, plus events without a start date.

    "Today" is the current UTC calendar date unless given.
    """
    if today is None:
        today = datetime.now(timezone.utc).date()
    return [
        e for e in await store.find_all()
        if e.start_date is None or e.start_date >= today
    ]


async def find_by_date_range(
    store: RecordStore[Event],
    start_date: Union[date, str, None] = None,
    end_date: Union[date, str, None] = None,
) -> list[Event]:
    """Return events starting within [start_date, end_date].

    Either bound may be omitted. Events without a start date always match.
    """
    lower = parse_calendar_date(start_date)
    upper = parse_calendar_date(end_date)

    def _in_range(event: Event) -> bool:
        if event.start_date is None:
            return True
        if lower and event.start_date < lower:
            return False
        if upper and event.start_date > upper:
            return False
        return True

    return [e for e in await store.find_all() if _in_range(e)]


async def get_statistics(store: RecordStore[Event]) -> EventStatistics:
    events = await store.find_all()
    by_status = Counter(e.status.value for e in events)
    by_country = Counter(e.country or "Unknown" for e in events)
    return EventStatistics(
        total=len(events),
        by_status={s.value: by_status.get(s.value, 0) for s in EventStatus},
        by_country=dict(by_country),
    )
