"""Shared fixtures: every test gets its own data directory under tmp_path."""
from datetime import datetime, timedelta, timezone

import pytest

from db import open_stores
from db.repositories import contacts, events, opportunities, scraped_events, scraping_jobs
from db.store import RecordStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def stores(data_dir):
    return open_stores(data_dir)


@pytest.fixture
def event_store(data_dir, clock):
    return RecordStore(events.EVENTS, data_dir, clock=clock)


@pytest.fixture
def contact_store(data_dir, clock):
    return RecordStore(contacts.CONTACTS, data_dir, clock=clock)


@pytest.fixture
def opportunity_store(data_dir, clock):
    return RecordStore(opportunities.OPPORTUNITIES, data_dir, clock=clock)


@pytest.fixture
def job_store(data_dir, clock):
    return RecordStore(scraping_jobs.SCRAPING_JOBS, data_dir, clock=clock)


@pytest.fixture
def scraped_store(data_dir, clock):
    return RecordStore(scraped_events.SCRAPED_EVENTS, data_dir, clock=clock)

