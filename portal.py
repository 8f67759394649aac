"""Event lead portal: command-line access to the record stores.

Every command maps onto one repository or service operation and prints JSON
(camelCase keys, the same shape the dashboard consumes).

Usage:
  # Upcoming events, optionally for one country
  python portal.py events upcoming
  python portal.py events by-country --country Switzerland

  # Create / update / delete from JSON
  python portal.py events create --json '{"name": "Swiss Fintech Day", "sourceUrl": "https://..."}'
  python portal.py opportunities update --id opp-1a2b3c --json '{"status": "QUALIFIED"}'

  # Dashboard snapshot and scraping jobs
  python portal.py dashboard
  python portal.py scrape start --url https://example.org/events.json
  python portal.py save-events extracted.json
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

import portal_config
from db import RecordNotFoundError, Stores, open_stores
from db.repositories import contacts as contacts_repo
from db.repositories import events as events_repo
from db.repositories import opportunities as opportunities_repo
from services import DashboardService, ScrapingService, save_events
from tools import default_registry

logger = logging.getLogger(__name__)

_KINDS = ("events", "contacts", "opportunities")


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def _print(value: Any) -> None:
    print(json.dumps(_to_jsonable(value), indent=2))


def _store_for(stores: Stores, kind: str):
    return getattr(stores, kind)


async def run_crud(stores: Stores, kind: str, action: str, args) -> Any:
    """list / show / create / update / delete for events, contacts, opportunities."""
    store = _store_for(stores, kind)
    if action == "list":
        if kind == "events" and not args.all:
            return await events_repo.find_upcoming(store)
        return await store.find_all()
    if action == "show":
        return await store.get(args.id)
    if action == "create":
        return await store.create(json.loads(args.json))
    if action == "update":
        updated = await store.update(args.id, json.loads(args.json))
        if updated is None:
            raise RecordNotFoundError(store.kind.name, args.id)
        return updated
    if action == "delete":
        if not await store.delete(args.id):
            raise RecordNotFoundError(store.kind.name, args.id)
        return {"success": True}
    if action == "stats":
        repo = {"events": events_repo, "contacts": contacts_repo, "opportunities": opportunities_repo}[kind]
        return await repo.get_statistics(store)
    if action == "by-event":
        repo = contacts_repo if kind == "contacts" else opportunities_repo
        return await repo.find_by_event(store, args.event_id)
    if action == "upcoming":
        return await events_repo.find_upcoming(store)
    if action == "by-country":
        # the dashboard only ever lists upcoming events per country
        wanted = args.country.lower()
        return [
            e for e in await events_repo.find_upcoming(store)
            if e.country and e.country.lower() == wanted
        ]
    if action == "range":
        return await events_repo.find_by_date_range(store, args.start, args.end)
    if action == "by-source-url":
        return await events_repo.find_by_source_url(store, args.source_url)
    if action == "top":
        return await opportunities_repo.get_top(store, args.limit)
    raise ValueError(f"Unknown {kind} action: {action}")


async def run_scrape(stores: Stores, action: str, args) -> Any:
    automated = portal_config.scraping_enabled()
    service = ScrapingService(
        stores.scraping_jobs,
        stores.scraped_events,
        registry=default_registry() if automated else None,
        automated=automated,
    )
    if action == "start":
        job_id = await service.start_job(args.url)
        return {"jobId": job_id, "message": "Scraping job started successfully"}
    if action == "status":
        job = await service.get_job_status(args.id)
        if job is None:
            raise RecordNotFoundError(stores.scraping_jobs.kind.name, args.id)
        return job
    if action == "events":
        return await service.get_job_events(args.id)
    if action == "jobs":
        return await service.get_recent_jobs(args.limit)
    if action == "cancel":
        if not await service.cancel_job(args.id):
            raise ValueError("Failed to cancel job or job already completed")
        return {"message": "Job cancelled successfully"}
    if action == "stats":
        return await service.get_stats()
    raise ValueError(f"Unknown scrape action: {action}")


async def run_dashboard(stores: Stores) -> Any:
    service = DashboardService(stores.events, stores.contacts, stores.opportunities)
    return await service.get_stats()


async def run_save_events(stores: Stores, path: Path) -> Any:
    items = json.loads(path.read_text())
    return await save_events(stores.events, items)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Event lead portal record stores")
    parser.add_argument("--data-dir", default=None, help="Directory holding the CSV files (default: PORTAL_DATA_DIR)")
    sub = parser.add_subparsers(dest="command")

    for kind in _KINDS:
        kind_parser = sub.add_parser(kind, help=f"Manage {kind}")
        actions = kind_parser.add_subparsers(dest="action", required=True)

        lst = actions.add_parser("list", help=f"List {kind}")
        if kind == "events":
            lst.add_argument("--all", action="store_true", help="Include past events")
        actions.add_parser("show", help="Show one record").add_argument("--id", required=True)
        actions.add_parser("create", help="Create from JSON").add_argument("--json", required=True)
        update = actions.add_parser("update", help="Apply a partial JSON update")
        update.add_argument("--id", required=True)
        update.add_argument("--json", required=True)
        actions.add_parser("delete", help="Delete one record").add_argument("--id", required=True)
        actions.add_parser("stats", help="Aggregate statistics")

        if kind == "events":
            actions.add_parser("upcoming", help="Events starting today or later")
            actions.add_parser("by-country", help="Upcoming events in a country").add_argument("--country", required=True)
            rng = actions.add_parser("range", help="Events starting within a date range")
            rng.add_argument("--start", default=None, help="YYYY-MM-DD (inclusive)")
            rng.add_argument("--end", default=None, help="YYYY-MM-DD (inclusive)")
            actions.add_parser("by-source-url", help="Event scraped from a URL").add_argument("--source-url", required=True)
        else:
            actions.add_parser("by-event", help=f"{kind} for an event").add_argument("--event-id", required=True)
        if kind == "opportunities":
            actions.add_parser("top", help="Best match scores first").add_argument("--limit", type=int, default=10)

    sub.add_parser("dashboard", help="Dashboard statistics snapshot")

    scrape = sub.add_parser("scrape", help="Scraping jobs")
    scrape_actions = scrape.add_subparsers(dest="action", required=True)
    scrape_actions.add_parser("start", help="Start a job").add_argument("--url", required=True)
    scrape_actions.add_parser("status", help="Job status").add_argument("--id", required=True)
    scrape_actions.add_parser("events", help="Events found by a job").add_argument("--id", required=True)
    scrape_actions.add_parser("jobs", help="Most recent jobs").add_argument("--limit", type=int, default=10)
    scrape_actions.add_parser("cancel", help="Cancel a pending or running job").add_argument("--id", required=True)
    scrape_actions.add_parser("stats", help="Job statistics")

    save = sub.add_parser("save-events", help="Save browser-extracted events from a JSON file")
    save.add_argument("file", type=Path)

    return parser


async def main(args) -> Any:
    stores = open_stores(args.data_dir)
    if args.command in _KINDS:
        return await run_crud(stores, args.command, args.action, args)
    if args.command == "dashboard":
        return await run_dashboard(stores)
    if args.command == "scrape":
        return await run_scrape(stores, args.action, args)
    if args.command == "save-events":
        return await run_save_events(stores, args.file)
    raise ValueError(f"Unknown command: {args.command}")


def cli() -> None:
    logging.basicConfig(level=portal_config.log_level(), format="%(levelname)s %(name)s %(message)s")
    parser = _build_arg_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        _print(asyncio.run(main(args)))
    except RecordNotFoundError as exc:
        print(f"Not found: {exc}", file=sys.stderr)
        sys.exit(1)
    except ValidationError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        sys.exit(2)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli()
