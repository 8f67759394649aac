"""Contact repository: per-event lookup and statistics."""
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Union

from db.codec import blank_to_none, nullable_aliases, to_bool
from db.store import RecordKind, RecordStore
from schemas import Contact, ContactCreate, ContactStatistics, ContactStatus, ContactUpdate

logger = logging.getLogger(__name__)

FIELDS = (
    "id", "firstName", "lastName", "fullName", "email", "phone",
    "company", "position", "linkedinUrl", "twitterUrl", "verified",
    "status", "source", "eventId", "createdAt", "updatedAt",
)
_NULLABLE = nullable_aliases(Contact)


def _decode_row(row: dict) -> Contact:
    blank_to_none(row, _NULLABLE)
    row["verified"] = to_bool(row.get("verified"))
    return Contact.model_validate(row)


def _make_new(data: ContactCreate, record_id: str, now: datetime) -> Contact:
    return Contact(
        **data.model_dump(exclude={"verified", "status"}),
        id=record_id,
        verified=bool(data.verified),
        status=data.status or ContactStatus.NEW,
        created_at=now,
        updated_at=now,
    )


CONTACTS = RecordKind(
    name="contact",
    file_name="contacts.csv",
    fields=FIELDS,
    model=Contact,
    create_schema=ContactCreate,
    update_schema=ContactUpdate,
    decode_row=_decode_row,
    make_new=_make_new,
    id_prefix="con",
)


def open_store(data_dir: Union[str, Path]) -> RecordStore[Contact]:
    return RecordStore(CONTACTS, data_dir)


async def find_by_event(store: RecordStore[Contact], event_id: str) -> list[Contact]:
    """Return contacts pointing at this event id."""
    return [c for c in await store.find_all() if c.event_id == event_id]


async def get_statistics(store: RecordStore[Contact]) -> ContactStatistics:
    contacts = await store.find_all()
    by_status = Counter(c.status.value for c in contacts)
    return ContactStatistics(
        total=len(contacts),
        verified=sum(1 for c in contacts if c.verified),
        by_status={s.value: by_status.get(s.value, 0) for s in ContactStatus},
    )
