"""Bulk save of events handed over by the browser-driven extraction."""
import logging
from datetime import date
from typing import Iterable, List, Optional, Union

from dateutil.parser import isoparse
from pydantic import TypeAdapter

import portal_config
from db.store import RecordStore
from schemas import EventCreate, ExtractedEvent, SaveEventsResult

logger = logging.getLogger(__name__)

_EXTRACTED = TypeAdapter(List[ExtractedEvent])
SOURCE_PLATFORM = "browser"


def _starts_on_or_after(item: ExtractedEvent, cutoff: date) -> bool:
    try:
        return isoparse(item.start_date).date() >= cutoff
    except (ValueError, OverflowError):
        logger.warning("Unparseable start date %r for %r, filtered", item.start_date, item.name)
        return False


def _to_event(item: ExtractedEvent) -> EventCreate:
    return EventCreate(
        name=item.name,
        description=item.description,
        website=item.website,
        start_date=item.start_date,
        end_date=item.end_date,
        location=item.location,
        city=item.city,
        country=item.country,
        source_url=item.website or "",
        source_platform=SOURCE_PLATFORM,
    )


async def save_events(
    events: RecordStore,
    items: Iterable[Union[dict, ExtractedEvent]],
    cutoff: Optional[date] = None,
) -> SaveEventsResult:
    """Persist extracted events starting on/after ``cutoff``; drop the rest.

    The whole batch is validated before anything is written, so malformed
    input raises pydantic.ValidationError without saving a partial batch.
    """
    if cutoff is None:
        cutoff = portal_config.save_events_cutoff()
    batch = _EXTRACTED.validate_python(list(items))
    keep = [item for item in batch if _starts_on_or_after(item, cutoff)]
    candidates = [_to_event(item) for item in keep]

    for event in candidates:
        await events.create(event)

    filtered = len(batch) - len(keep)
    logger.info("Saved %d browser events (filtered %d before %s)", len(keep), filtered, cutoff)
    return SaveEventsResult(
        success=True,
        saved_count=len(keep),
        filtered_count=filtered,
        message=f"Saved {len(keep)} events (filtered {filtered} past events)",
    )
