"""JSON event-feed scraper.

Handles URLs that serve a JSON list of events (``.json`` paths, or a body of
``{"events": [...]}``). Calls the feed directly with requests; network and
decode errors propagate so the scraping job records them.
"""
import logging
from typing import Any, Dict, List

import requests

import portal_config

logger = logging.getLogger(__name__)

# feed key -> ScrapedEvent field
FIELD_MAP = {
    "name": "name",
    "title": "name",
    "description": "description",
    "summary": "description",
    "url": "url",
    "link": "url",
    "startDate": "start_date",
    "start_date": "start_date",
    "start": "start_date",
    "endDate": "end_date",
    "end_date": "end_date",
    "end": "end_date",
    "location": "location",
    "venue": "location",
    "city": "city",
    "country": "country",
    "topic": "topic",
    "category": "topic",
    "organizer": "organizer",
    "website": "website",
}

_URL_FIELDS = {"url", "website"}


def can_handle(url: str) -> bool:
    path = url.split("?", 1)[0].lower()
    return path.startswith(("http://", "https://")) and path.endswith(".json")


def _normalise(entry: Dict[str, Any], feed_url: str) -> Dict[str, Any]:
    event: Dict[str, Any] = {}
    for key, target in FIELD_MAP.items():
        value = entry.get(key)
        if value in (None, "") or target in event:
            continue
        text = str(value).strip()
        if target in _URL_FIELDS and not text.startswith(("http://", "https://")):
            continue
        event[target] = text
    event["raw_data"] = {"source": "json-feed", "feedUrl": feed_url, "entry": entry}
    return event


def scrape_feed(url: str) -> List[Dict[str, Any]]:
    """Fetch ``url`` and return event-like dicts for every named entry.

    Args:
        url: Feed URL returning a JSON array or an object with an "events" array.

    Returns:
        List of dicts keyed by ScrapedEvent field names.
    """
    resp = requests.get(
        url,
        headers={"Accept": "application/json"},
        timeout=portal_config.feed_timeout(),
    )
    resp.raise_for_status()
    payload = resp.json()
    entries = payload.get("events", []) if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        raise ValueError(f"Unexpected feed shape from {url}: {type(entries).__name__}")

    events = []
    for entry in entries:
        if not isinstance(entry, dict) or not (entry.get("name") or entry.get("title")):
            logger.debug("Skipping feed entry without a name: %r", entry)
            continue
        events.append(_normalise(entry, url))
    logger.info("Feed %s returned %d events", url, len(events))
    return events
