"""Generic record store over a flat CSV file.

A ``RecordStore`` keeps one record kind in one file. It has no cache: every
call reads the whole file, and every mutation rewrites it from the full
in-memory record set. The per-kind policy (field order, row decoding, defaults
for new records) is supplied as a ``RecordKind`` value, not by subclassing.

Mutations through the same store instance are serialised with an asyncio lock.
Two store instances pointed at the same file still race, and the last
rewrite wins.
"""
import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from db import codec
from db.errors import RecordNotFoundError

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


@dataclass(frozen=True)
class RecordKind(Generic[R]):
    """Everything the store needs to know about one record kind.

    decode_row: text row (header name -> cell) to a validated record; raises
        ValueError (pydantic.ValidationError included) for a bad row.
    make_new: (validated creation input, new id, timestamp) to a full record,
        applying the kind's defaults.
    check_update: optional (current record, changed fields) hook run under
        the store lock before an update is written; raises to refuse it.
    """

    name: str
    file_name: str
    fields: tuple[str, ...]
    model: Type[R]
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]
    decode_row: Callable[[dict], R]
    make_new: Callable[[Any, str, datetime], R]
    id_prefix: str = "id"
    check_update: Optional[Callable[[R, dict], None]] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str, taken: set) -> str:
    """Return a fresh id that does not collide with ``taken``."""
    while True:
        candidate = f"{prefix}-{uuid.uuid4().hex[:12]}"
        if candidate not in taken:
            return candidate


class RecordStore(Generic[R]):
    """CRUD over one CSV file."""

    def __init__(
        self,
        kind: RecordKind[R],
        data_dir: Union[str, Path],
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.kind = kind
        self.path = Path(data_dir) / kind.file_name
        self._clock = clock or _utcnow
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"RecordStore({self.kind.name!r}, {str(self.path)!r})"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_all(self) -> list[R]:
        """Return every valid record in file order.

        Rows that fail decoding are dropped and logged, never raised.
        """
        rows = await asyncio.to_thread(codec.read_rows, self.path)
        records: list[R] = []
        for index, row in enumerate(rows, start=1):
            try:
                records.append(self.kind.decode_row(dict(row)))
            except ValueError as exc:
                logger.warning(
                    "Dropping invalid %s row %d in %s: %s",
                    self.kind.name, index, self.path, exc,
                )
        return records

    async def find_by_id(self, record_id: str) -> Optional[R]:
        """Return the record with this id, or None."""
        for record in await self.find_all():
            if record.id == record_id:
                return record
        return None

    async def get(self, record_id: str) -> R:
        """Like find_by_id, but raise RecordNotFoundError when absent."""
        record = await self.find_by_id(record_id)
        if record is None:
            raise RecordNotFoundError(self.kind.name, record_id)
        return record

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(self, data: Union[dict, BaseModel]) -> R:
        """Validate creation input, append a new record, rewrite the file."""
        payload = self._validate(self.kind.create_schema, data)
        async with self._lock:
            records = await self.find_all()
            record_id = new_id(self.kind.id_prefix, {r.id for r in records})
            record = self.kind.make_new(payload, record_id, self._clock())
            records.append(record)
            await self._write_all(records)
        logger.info("Created %s %s", self.kind.name, record.id)
        return record

    async def update(self, record_id: str, changes: Union[dict, BaseModel]) -> Optional[R]:
        """Shallow-merge validated partial fields into a record.

        Returns the updated record, or None when the id is unknown. ``id``
        and ``created_at`` are never changed; ``updated_at`` always moves
        forward. The kind's ``check_update`` hook sees the record as it is
        on disk, under the lock, and may refuse the change by raising.
        """
        patch = self._validate(self.kind.update_schema, changes)
        fields = patch.model_dump(exclude_unset=True)
        async with self._lock:
            records = await self.find_all()
            for index, record in enumerate(records):
                if record.id == record_id:
                    break
            else:
                return None

            if self.kind.check_update is not None:
                self.kind.check_update(record, fields)
            merged = {
                **record.model_dump(),
                **fields,
                "updated_at": self._touch(record.updated_at),
            }
            updated = self.kind.model.model_validate(merged)
            records[index] = updated
            await self._write_all(records)
        logger.info("Updated %s %s (%s)", self.kind.name, record_id, ", ".join(sorted(fields)))
        return updated

    async def delete(self, record_id: str) -> bool:
        """Remove a record. Returns False, without touching the file, if absent."""
        async with self._lock:
            records = await self.find_all()
            remaining = [r for r in records if r.id != record_id]
            if len(remaining) == len(records):
                return False
            await self._write_all(remaining)
        logger.info("Deleted %s %s", self.kind.name, record_id)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(schema: Type[BaseModel], data: Union[dict, BaseModel]) -> BaseModel:
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        return schema.model_validate(data)

    def _touch(self, previous: datetime) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if previous.tzinfo is None:
            previous = previous.replace(tzinfo=timezone.utc)
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    async def _write_all(self, records: list[R]) -> None:
        rows = [codec.encode_record(r, self.kind.fields) for r in records]
        await asyncio.to_thread(codec.write_rows, self.path, rows, self.kind.fields)
