"""Tests for the generic CSV record store."""
import asyncio
from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from db import RecordNotFoundError, RecordStore
from db.repositories import contacts, events, opportunities, scraped_events, scraping_jobs


def _event(**overrides):
    data = {
        "name": "Swiss Fintech Forum",
        "sourceUrl": "https://example.org/events/fintech",
        "startDate": "2025-11-12",
        "country": "Switzerland",
    }
    data.update(overrides)
    return data


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def _event_row(**cells):
    base = {
        "id": "evt-1",
        "name": "Expo",
        "sourceUrl": "https://example.org/expo",
        "status": "DISCOVERED",
        "scrapedAt": "2025-09-01T10:00:00+00:00",
        "createdAt": "2025-09-01T10:00:00+00:00",
        "updatedAt": "2025-09-01T10:00:00+00:00",
    }
    base.update(cells)
    return ",".join(base.get(name, "") for name in events.FIELDS)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_missing_file_reads_as_empty(event_store):
    assert await event_store.find_all() == []
    assert await event_store.find_by_id("evt-missing") is None
    assert not event_store.path.exists()


@pytest.mark.asyncio
async def test_empty_and_header_only_files_read_as_empty(event_store):
    _write(event_store.path, "")
    assert await event_store.find_all() == []

    _write(event_store.path, ",".join(events.FIELDS) + "\n")
    assert await event_store.find_all() == []


@pytest.mark.asyncio
async def test_invalid_row_is_dropped_and_removed_on_next_write(event_store):
    """A bad row never hides the good ones; the next rewrite drops it for good."""
    lines = [
        ",".join(events.FIELDS),
        _event_row(id="evt-good"),
        _event_row(id="evt-bad", status="BOGUS"),
        _event_row(id="evt-worse", estimatedAttendees="lots"),
    ]
    _write(event_store.path, "\n".join(lines) + "\n")

    records = await event_store.find_all()
    assert [r.id for r in records] == ["evt-good"]

    await event_store.create(_event())
    text = event_store.path.read_text()
    assert "evt-bad" not in text
    assert "evt-worse" not in text
    assert len(await event_store.find_all()) == 2


@pytest.mark.asyncio
async def test_get_raises_for_unknown_id(event_store):
    with pytest.raises(RecordNotFoundError) as excinfo:
        await event_store.get("evt-nope")
    assert excinfo.value.record_id == "evt-nope"


@pytest.mark.asyncio
async def test_unreadable_file_propagates(event_store):
    event_store.path.mkdir(parents=True)
    with pytest.raises(OSError):
        await event_store.find_all()


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_assigns_identity_and_defaults(event_store, clock):
    event = await event_store.create(_event())

    assert event.id.startswith("evt-")
    assert event.status.value == "DISCOVERED"
    assert event.created_at == clock.now
    assert event.updated_at == clock.now
    assert event.start_date == date(2025, 11, 12)
    assert await event_store.find_by_id(event.id) == event


@pytest.mark.asyncio
async def test_create_ids_are_unique(event_store):
    created = [await event_store.create(_event(name=f"Event {i}")) for i in range(5)]
    assert len({e.id for e in created}) == 5


@pytest.mark.asyncio
async def test_create_rejects_invalid_input_without_writing(event_store):
    with pytest.raises(ValidationError):
        await event_store.create({"name": "No source"})
    with pytest.raises(ValidationError):
        await event_store.create(_event(estimatedAttendees=-5))
    assert not event_store.path.exists()


@pytest.mark.asyncio
async def test_concurrent_creates_keep_every_record(event_store):
    await asyncio.gather(*(event_store.create(_event(name=f"Event {i}")) for i in range(10)))
    records = await event_store.find_all()
    assert sorted(r.name for r in records) == sorted(f"Event {i}" for i in range(10))


@pytest.mark.asyncio
async def test_text_with_delimiters_survives_a_round_trip(event_store, data_dir):
    description = 'Panels, "keynotes"\nand a closing dinner'
    created = await event_store.create(_event(description=description, location="Hall 1, Level 2"))

    reread = await RecordStore(events.EVENTS, data_dir).find_by_id(created.id)
    assert reread.description == description
    assert reread.location == "Hall 1, Level 2"


@pytest.mark.asyncio
async def test_written_file_has_header_in_field_order(event_store):
    await event_store.create(_event())
    header = event_store.path.read_text().splitlines()[0]
    assert header.split(",") == list(events.FIELDS)


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_merges_fields_and_moves_updated_at(event_store, clock):
    event = await event_store.create(_event(city="Zurich"))
    clock.advance(minutes=5)

    updated = await event_store.update(event.id, {"name": "Renamed", "status": "CONTACTED"})

    assert updated.name == "Renamed"
    assert updated.status.value == "CONTACTED"
    assert updated.city == "Zurich"
    assert updated.created_at == event.created_at
    assert updated.updated_at == clock.now
    assert await event_store.find_by_id(event.id) == updated


@pytest.mark.asyncio
async def test_update_never_changes_id_or_created_at(event_store, clock):
    event = await event_store.create(_event())
    clock.advance(hours=1)

    updated = await event_store.update(event.id, {
        "id": "evt-hijacked",
        "createdAt": "2020-01-01T00:00:00+00:00",
        "name": "Renamed",
    })

    assert updated.id == event.id
    assert updated.created_at == event.created_at
    assert await event_store.find_by_id("evt-hijacked") is None


@pytest.mark.asyncio
async def test_updated_at_strictly_increases_with_a_stopped_clock(event_store):
    event = await event_store.create(_event())
    first = await event_store.update(event.id, {"name": "Once"})
    second = await event_store.update(event.id, {"name": "Twice"})

    assert event.updated_at < first.updated_at < second.updated_at
    assert first.updated_at - event.updated_at == timedelta(microseconds=1)


@pytest.mark.asyncio
async def test_update_unknown_id_returns_none(event_store):
    await event_store.create(_event())
    before = event_store.path.read_bytes()
    assert await event_store.update("evt-nope", {"name": "x"}) is None
    assert event_store.path.read_bytes() == before


@pytest.mark.asyncio
async def test_update_rejects_invalid_fields(event_store):
    event = await event_store.create(_event())
    before = event_store.path.read_bytes()
    with pytest.raises(ValidationError):
        await event_store.update(event.id, {"status": "ARCHIVED"})
    assert event_store.path.read_bytes() == before


@pytest.mark.asyncio
async def test_update_can_clear_optional_field(event_store, clock):
    event = await event_store.create(_event(city="Basel"))
    updated = await event_store.update(event.id, {"city": None})
    assert updated.city is None
    assert (await event_store.get(event.id)).city is None


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_delete_removes_only_that_record(event_store):
    keep = await event_store.create(_event(name="Keep"))
    drop = await event_store.create(_event(name="Drop"))

    assert await event_store.delete(drop.id) is True
    assert [r.id for r in await event_store.find_all()] == [keep.id]


@pytest.mark.asyncio
async def test_delete_unknown_id_leaves_file_untouched(event_store):
    assert await event_store.delete("evt-nope") is False
    assert not event_store.path.exists()

    await event_store.create(_event())
    before = event_store.path.read_bytes()
    assert await event_store.delete("evt-nope") is False
    assert event_store.path.read_bytes() == before


@pytest.mark.asyncio
async def test_open_stores_uses_one_file_per_kind(stores, data_dir):
    await stores.events.create(_event())
    await stores.scraping_jobs.create({"url": "https://example.org/events.json"})

    assert sorted(p.name for p in data_dir.iterdir()) == ["events.csv", "scraping-jobs.csv"]
    assert stores.contacts.path == data_dir / "contacts.csv"
    assert stores.opportunities.path == data_dir / "opportunities.csv"
    assert stores.scraped_events.path == data_dir / "scraped-events.csv"


# ---------------------------------------------------------------------------
# Typed round trips: written by one store, read back by a fresh one
# ---------------------------------------------------------------------------


async def _reread(kind, data_dir):
    return await RecordStore(kind, data_dir).find_all()


@pytest.mark.asyncio
async def test_event_round_trip(event_store, data_dir):
    full = await event_store.create(_event(
        description="Two days of payments talks",
        website="https://example.org/fintech",
        endDate="2025-11-13",
        location="Kongresshaus",
        city="Zurich",
        industry="Finance",
        eventType="conference",
        estimatedAttendees=1200,
        sourcePlatform="manual",
        status="ANALYZED",
    ))
    sparse = await event_store.create({"name": "Sparse", "sourceUrl": ""})

    assert await _reread(events.EVENTS, data_dir) == [full, sparse]
    assert sparse.start_date is None and sparse.estimated_attendees is None


@pytest.mark.asyncio
async def test_contact_round_trip(contact_store, data_dir):
    verified = await contact_store.create({
        "firstName": "Anna",
        "lastName": "Muster",
        "fullName": "Anna Muster",
        "email": "anna@example.org",
        "linkedinUrl": "https://linkedin.com/in/anna",
        "verified": True,
        "status": "VERIFIED",
        "eventId": "evt-1",
    })
    bare = await contact_store.create({"fullName": "Ben Beispiel"})

    assert await _reread(contacts.CONTACTS, data_dir) == [verified, bare]
    assert bare.verified is False and bare.email is None


@pytest.mark.asyncio
async def test_opportunity_round_trip(opportunity_store, data_dir):
    scored = await opportunity_store.create({
        "eventName": "Swiss Fintech Forum",
        "estimatedValue": 2500000,
        "matchScore": 87.25,
        "recommendedProduct": "Lead scoring",
        "priority": "URGENT",
        "followUpDate": "2025-10-15",
        "eventId": "evt-1",
        "contactId": "con-1",
    })
    unvalued = await opportunity_store.create({
        "eventName": "Basel Expo",
        "estimatedValue": 1234.5,
        "matchScore": 0,
        "eventId": "evt-2",
    })
    empty = await opportunity_store.create({"eventName": "X", "matchScore": 100, "eventId": "evt-3"})

    reread = await _reread(opportunities.OPPORTUNITIES, data_dir)
    assert reread == [scored, unvalued, empty]
    assert reread[0].estimated_value == 2500000.0
    assert reread[0].match_score == 87.25
    assert reread[2].estimated_value is None


@pytest.mark.asyncio
async def test_scraping_job_round_trip(job_store, data_dir):
    job = await job_store.create({
        "url": "https://example.org/events.json",
        "startTime": "2025-10-01T11:59:30.123456+00:00",
        "eventsFound": 7,
    })

    assert await _reread(scraping_jobs.SCRAPING_JOBS, data_dir) == [job]
    assert job.end_time is None and job.error_message is None


@pytest.mark.asyncio
async def test_scraped_event_round_trip(scraped_store, data_dir):
    scraped = await scraped_store.create({
        "scrapingJobId": "job-1",
        "name": "AI Summit",
        "url": "https://example.org/ai",
        "startDate": "2025-11-20",
        "country": None,
        "rawData": {"entry": {"tags": ["ai", "ml"], "seats": 300}, "source": "json-feed"},
    })

    assert await _reread(scraped_events.SCRAPED_EVENTS, data_dir) == [scraped]
    assert scraped.country is None and scraped.website is None
