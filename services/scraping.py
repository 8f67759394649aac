"""Scraping job lifecycle.

A job is created PENDING and always ends COMPLETED or FAILED. With automated
scraping switched off (the default deployment) the job is closed at once with
no events, and extraction happens by hand in the browser. With it switched on,
the first registered scraper whose predicate accepts the URL runs the job:

    PENDING -> RUNNING -> COMPLETED (events saved, eventsFound set)
                       -> FAILED    (no scraper, or the scraper raised)

Scraper errors are recorded on the job, never raised to the caller.
A job cancelled while its scraper runs stays cancelled, and whatever the
scraper returns for it is discarded.
"""
import asyncio
import inspect
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from db.repositories import scraped_events as scraped_repo
from db.repositories import scraping_jobs as jobs_repo
from db.errors import InvalidTransitionError
from db.store import RecordStore
from schemas import JobStatus, ScrapedEvent, ScrapingJob, ScrapingJobStatistics

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]
Handler = Callable[[str], Union[List[Dict[str, Any]], Awaitable[List[Dict[str, Any]]]]]

DISABLED_MESSAGE = "Automated scraping disabled - use the browser interface instead"
NO_SCRAPER_MESSAGE = "No suitable scraper found for this URL"
CANCELLED_MESSAGE = "Job cancelled by user"
MAX_RECENT_JOBS = 50


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ScraperRegistry:
    """Ordered (predicate, handler) pairs; the first accepting predicate wins."""

    def __init__(self):
        self._entries: List[Tuple[str, Predicate, Handler]] = []

    def register(self, name: str, predicate: Predicate, handler: Handler) -> None:
        self._entries.append((name, predicate, handler))

    def resolve(self, url: str) -> Optional[Tuple[str, Handler]]:
        for name, predicate, handler in self._entries:
            if predicate(url):
                return name, handler
        return None

    def __len__(self) -> int:
        return len(self._entries)


def _scraped_payload(item: Dict[str, Any], url: str, job_id: str) -> Dict[str, Any]:
    payload = {
        key: value for key, value in item.items()
        if value is not None and key not in ("scrapingJobId", "scraping_job_id")
    }
    payload.setdefault("url", url)
    payload["scraping_job_id"] = job_id
    return payload


async def _run_handler(handler: Handler, url: str) -> List[Dict[str, Any]]:
    if inspect.iscoroutinefunction(handler):
        return await handler(url)
    return await asyncio.to_thread(handler, url)


class ScrapingService:
    def __init__(
        self,
        jobs: RecordStore,
        scraped: RecordStore,
        registry: Optional[ScraperRegistry] = None,
        automated: bool = False,
    ):
        self.jobs = jobs
        self.scraped = scraped
        self.registry = registry if registry is not None else ScraperRegistry()
        self.automated = automated

    async def start_job(self, url: str) -> str:
        """Create a job for ``url``, drive it to a terminal state, return its id."""
        job = await self.jobs.create({"url": url, "status": JobStatus.PENDING})
        if self.automated:
            await self._perform_scraping(job.id, url)
        else:
            now = _now()
            await jobs_repo.update_status(
                self.jobs,
                job.id,
                JobStatus.COMPLETED,
                start_time=now,
                end_time=now,
                events_found=0,
                error_message=DISABLED_MESSAGE,
            )
        return job.id

    async def _perform_scraping(self, job_id: str, url: str) -> None:
        await jobs_repo.update_status(self.jobs, job_id, JobStatus.RUNNING, start_time=_now())
        try:
            match = self.registry.resolve(url)
            if match is None:
                await self._finish(
                    job_id, JobStatus.FAILED,
                    end_time=_now(), error_message=NO_SCRAPER_MESSAGE,
                )
                return

            name, handler = match
            logger.info("Scraping %s with %s (job %s)", url, name, job_id)
            items = list(await _run_handler(handler, url))
            current = await self.jobs.find_by_id(job_id)
            if current is None or jobs_repo.is_terminal(current):
                logger.info(
                    "Scraping job %s finished while scraping; %d results discarded",
                    job_id, len(items),
                )
                return
            for item in items:
                await self.scraped.create(_scraped_payload(item, url, job_id))

            await self._finish(
                job_id, JobStatus.COMPLETED,
                end_time=_now(), events_found=len(items),
            )
        except Exception as exc:
            logger.warning("Scraping job %s failed: %s", job_id, exc, exc_info=True)
            await self._finish(
                job_id, JobStatus.FAILED,
                end_time=_now(), error_message=str(exc) or type(exc).__name__,
            )

    async def _finish(self, job_id: str, status: JobStatus, **fields) -> None:
        try:
            await jobs_repo.update_status(self.jobs, job_id, status, **fields)
        except InvalidTransitionError:
            # cancelled while the scraper was running
            logger.info("Scraping job %s already finished; %s not recorded", job_id, status.value)

    async def get_job_status(self, job_id: str) -> Optional[ScrapingJob]:
        return await self.jobs.find_by_id(job_id)

    async def get_job_events(self, job_id: str) -> List[ScrapedEvent]:
        return await scraped_repo.find_by_job(self.scraped, job_id)

    async def get_all_jobs(self) -> List[ScrapingJob]:
        return await self.jobs.find_all()

    async def get_recent_jobs(self, limit: int = 10) -> List[ScrapingJob]:
        """Newest jobs first, ``limit`` clamped to 1..50."""
        limit = min(max(limit, 1), MAX_RECENT_JOBS)
        jobs = sorted(await self.jobs.find_all(), key=lambda j: j.created_at, reverse=True)
        return jobs[:limit]

    async def cancel_job(self, job_id: str) -> bool:
        """Fail a PENDING or RUNNING job. False for unknown or finished jobs."""
        try:
            job = await jobs_repo.update_status(
                self.jobs, job_id, JobStatus.FAILED,
                end_time=_now(), error_message=CANCELLED_MESSAGE,
            )
        except InvalidTransitionError:
            return False
        return job is not None

    async def get_stats(self) -> ScrapingJobStatistics:
        return await jobs_repo.get_statistics(self.jobs)
