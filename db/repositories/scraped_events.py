"""Scraped event repository: raw extraction results per scraping job."""
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from db.codec import blank_to_none, nullable_aliases, to_json
from db.store import RecordKind, RecordStore
from schemas import ScrapedEvent, ScrapedEventCreate, ScrapedEventStatistics, ScrapedEventUpdate

logger = logging.getLogger(__name__)

FIELDS = (
    "id", "scrapingJobId", "name", "description", "url", "startDate",
    "endDate", "location", "city", "country", "topic", "organizer",
    "website", "rawData", "createdAt", "updatedAt",
)
_NULLABLE = nullable_aliases(ScrapedEvent)


def _decode_row(row: dict) -> ScrapedEvent:
    blank_to_none(row, _NULLABLE)
    row["rawData"] = to_json(row.get("rawData"))
    return ScrapedEvent.model_validate(row)


def _make_new(data: ScrapedEventCreate, record_id: str, now: datetime) -> ScrapedEvent:
    return ScrapedEvent(
        **data.model_dump(),
        id=record_id,
        created_at=now,
        updated_at=now,
    )


SCRAPED_EVENTS = RecordKind(
    name="scraped event",
    file_name="scraped-events.csv",
    fields=FIELDS,
    model=ScrapedEvent,
    create_schema=ScrapedEventCreate,
    update_schema=ScrapedEventUpdate,
    decode_row=_decode_row,
    make_new=_make_new,
    id_prefix="sev",
)


def open_store(data_dir: Union[str, Path]) -> RecordStore[ScrapedEvent]:
    return RecordStore(SCRAPED_EVENTS, data_dir)


def _contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle in value.lower()


async def find_by_job(store: RecordStore[ScrapedEvent], scraping_job_id: str) -> list[ScrapedEvent]:
    return [e for e in await store.find_all() if e.scraping_job_id == scraping_job_id]


async def find_by_city(store: RecordStore[ScrapedEvent], city: str) -> list[ScrapedEvent]:
    """Case-insensitive substring match on city."""
    needle = city.lower()
    return [e for e in await store.find_all() if _contains(e.city, needle)]


async def find_by_topic(store: RecordStore[ScrapedEvent], topic: str) -> list[ScrapedEvent]:
    """Case-insensitive substring match on topic, name or description."""
    needle = topic.lower()
    return [
        e for e in await store.find_all()
        if _contains(e.topic, needle) or _contains(e.name, needle) or _contains(e.description, needle)
    ]


async def get_statistics(store: RecordStore[ScrapedEvent]) -> ScrapedEventStatistics:
    events = await store.find_all()
    return ScrapedEventStatistics(
        total=len(events),
        by_country=dict(Counter(e.country or "Unknown" for e in events)),
    )
