"""Opportunity repository: per-event lookup, top-N by score, pipeline statistics."""
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Union

from db.codec import blank_to_none, nullable_aliases, to_float
from db.store import RecordKind, RecordStore
from schemas import (
    Opportunity,
    OpportunityCreate,
    OpportunityStatistics,
    OpportunityStatus,
    OpportunityUpdate,
    Priority,
)

logger = logging.getLogger(__name__)

FIELDS = (
    "id", "eventName", "estimatedValue", "matchScore", "recommendedProduct",
    "status", "priority", "notes", "followUpDate", "closedAt",
    "eventId", "contactId", "createdAt", "updatedAt",
)
_NULLABLE = nullable_aliases(Opportunity)


def _decode_row(row: dict) -> Opportunity:
    blank_to_none(row, _NULLABLE)
    row["estimatedValue"] = to_float(row.get("estimatedValue"))
    row["matchScore"] = to_float(row.get("matchScore"))
    return Opportunity.model_validate(row)


def _make_new(data: OpportunityCreate, record_id: str, now: datetime) -> Opportunity:
    return Opportunity(
        **data.model_dump(exclude={"status", "priority"}),
        id=record_id,
        status=data.status or OpportunityStatus.NEW,
        priority=data.priority or Priority.MEDIUM,
        created_at=now,
        updated_at=now,
    )


OPPORTUNITIES = RecordKind(
    name="opportunity",
    file_name="opportunities.csv",
    fields=FIELDS,
    model=Opportunity,
    create_schema=OpportunityCreate,
    update_schema=OpportunityUpdate,
    decode_row=_decode_row,
    make_new=_make_new,
    id_prefix="opp",
)


def open_store(data_dir: Union[str, Path]) -> RecordStore[Opportunity]:
    return RecordStore(OPPORTUNITIES, data_dir)


async def find_by_event(store: RecordStore[Opportunity], event_id: str) -> list[Opportunity]:
    """Return opportunities pointing at this event id."""
    return [o for o in await store.find_all() if o.event_id == event_id]


async def get_top(store: RecordStore[Opportunity], limit: int = 10) -> list[Opportunity]:
    """Return the ``limit`` best-matching opportunities, highest score first.

    Equal scores keep their file order.
    """
    ranked = sorted(await store.find_all(), key=lambda o: o.match_score, reverse=True)
    return ranked[:max(limit, 0)]


async def get_statistics(store: RecordStore[Opportunity]) -> OpportunityStatistics:
    opportunities = await store.find_all()
    by_status = Counter(o.status.value for o in opportunities)
    by_priority = Counter(o.priority.value for o in opportunities)
    total_value = sum(o.estimated_value for o in opportunities if o.estimated_value is not None)
    avg_score = (
        sum(o.match_score for o in opportunities) / len(opportunities)
        if opportunities else 0.0
    )
    return OpportunityStatistics(
        total=len(opportunities),
        by_status={s.value: by_status.get(s.value, 0) for s in OpportunityStatus},
        by_priority={p.value: by_priority.get(p.value, 0) for p in Priority},
        total_estimated_value=float(total_value),
        avg_match_score=avg_score,
    )
