"""Store construction for the event lead portal.

Provides:
- Stores: one RecordStore per record kind, all under the same data directory
- open_stores(): build them explicitly (no module-level singletons)

Usage:
    stores = open_stores()
    events = await stores.events.find_all()
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from db.repositories import contacts, events, opportunities, scraped_events, scraping_jobs
from db.store import RecordStore
import portal_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stores:
    data_dir: Path
    events: RecordStore
    contacts: RecordStore
    opportunities: RecordStore
    scraping_jobs: RecordStore
    scraped_events: RecordStore


def open_stores(data_dir: Optional[Union[str, Path]] = None) -> Stores:
    """Build a store for every record kind.

    data_dir defaults to PORTAL_DATA_DIR (see portal_config). Files are not
    created until the first write.
    """
    if data_dir is None:
        data_dir = portal_config.data_dir()
    data_dir = Path(data_dir)
    logger.debug("Opening record stores under %s", data_dir)
    return Stores(
        data_dir=data_dir,
        events=events.open_store(data_dir),
        contacts=contacts.open_store(data_dir),
        opportunities=opportunities.open_store(data_dir),
        scraping_jobs=scraping_jobs.open_store(data_dir),
        scraped_events=scraped_events.open_store(data_dir),
    )
