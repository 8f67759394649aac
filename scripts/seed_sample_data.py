"""Seed a data directory with a few events, contacts and opportunities.

Useful for trying the dashboard locally:

    python scripts/seed_sample_data.py --data-dir ./data

Existing files are appended to, not replaced.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Resolve project root so imports work when run from any cwd
_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_ROOT))

from db import open_stores

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)

SAMPLE_EVENTS = [
    {
        "name": "Swiss Fintech Forum",
        "startDate": "2026-11-12",
        "endDate": "2026-11-13",
        "city": "Zurich",
        "country": "Switzerland",
        "industry": "Finance",
        "eventType": "conference",
        "estimatedAttendees": 800,
        "sourceUrl": "https://example.org/events/swiss-fintech-forum",
        "sourcePlatform": "manual",
    },
    {
        "name": "Geneva Health Summit",
        "startDate": "2027-02-03",
        "city": "Geneva",
        "country": "Switzerland",
        "industry": "Healthcare",
        "eventType": "summit",
        "estimatedAttendees": 1200,
        "sourceUrl": "https://example.org/events/geneva-health-summit",
        "sourcePlatform": "manual",
    },
    {
        "name": "Basel Logistics Expo",
        "city": "Basel",
        "country": "Switzerland",
        "industry": "Logistics",
        "eventType": "tradeshow",
        "sourceUrl": "https://example.org/events/basel-logistics-expo",
        "sourcePlatform": "manual",
    },
]


async def seed(data_dir: Path) -> None:
    stores = open_stores(data_dir)
    for index, event_data in enumerate(SAMPLE_EVENTS):
        event = await stores.events.create(event_data)
        contact = await stores.contacts.create({
            "fullName": f"Organizer {index + 1}",
            "email": f"organizer{index + 1}@example.org",
            "company": event.name,
            "eventId": event.id,
        })
        await stores.opportunities.create({
            "eventName": event.name,
            "estimatedValue": 5000 * (index + 1),
            "matchScore": 90 - index * 15,
            "eventId": event.id,
            "contactId": contact.id,
        })
    logger.info("Seeded %d events with contacts and opportunities in %s", len(SAMPLE_EVENTS), data_dir)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--data-dir", type=Path, default=Path("data"))
    asyncio.run(seed(parser.parse_args().data_dir))
