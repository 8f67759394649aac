"""Scraping job repository: status lookups and the job state machine.

PENDING -> RUNNING -> COMPLETED | FAILED. A job may also finish straight from
PENDING. COMPLETED and FAILED are terminal. The check is the kind's update
hook, so any status change made through the store goes through it.
"""
import logging
from collections import Counter
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Union

from db.codec import blank_to_none, drop_blank, nullable_aliases, to_int
from db.errors import InvalidTransitionError
from db.store import RecordKind, RecordStore
from schemas import (
    JobStatus,
    ScrapingJob,
    ScrapingJobCreate,
    ScrapingJobStatistics,
    ScrapingJobUpdate,
)

logger = logging.getLogger(__name__)

FIELDS = (
    "id", "url", "status", "startTime", "endTime", "eventsFound",
    "errorMessage", "createdAt", "updatedAt",
)
_NULLABLE = nullable_aliases(ScrapingJob)

TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})
_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.RUNNING, JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.RUNNING: {JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.COMPLETED: set(),
    JobStatus.FAILED: set(),
}


def _decode_row(row: dict) -> ScrapingJob:
    blank_to_none(row, _NULLABLE)
    drop_blank(row, "eventsFound")
    if "eventsFound" in row:
        row["eventsFound"] = to_int(row["eventsFound"])
    return ScrapingJob.model_validate(row)


def _check_transition(job: ScrapingJob, fields: dict) -> None:
    status = fields.get("status")
    if status is None:
        return
    status = JobStatus(status)
    if status not in _TRANSITIONS[job.status]:
        raise InvalidTransitionError(job.id, job.status.value, status.value)
    logger.info("Scraping job %s: %s -> %s", job.id, job.status.value, status.value)


def _make_new(data: ScrapingJobCreate, record_id: str, now: datetime) -> ScrapingJob:
    return ScrapingJob(
        **data.model_dump(),
        id=record_id,
        created_at=now,
        updated_at=now,
    )


SCRAPING_JOBS = RecordKind(
    name="scraping job",
    file_name="scraping-jobs.csv",
    fields=FIELDS,
    model=ScrapingJob,
    create_schema=ScrapingJobCreate,
    update_schema=ScrapingJobUpdate,
    decode_row=_decode_row,
    make_new=_make_new,
    id_prefix="job",
    check_update=_check_transition,
)


def open_store(data_dir: Union[str, Path]) -> RecordStore[ScrapingJob]:
    return RecordStore(SCRAPING_JOBS, data_dir)


def is_terminal(job: ScrapingJob) -> bool:
    return job.status in TERMINAL_STATUSES


async def find_by_status(store: RecordStore[ScrapingJob], status: JobStatus) -> list[ScrapingJob]:
    return [j for j in await store.find_all() if j.status == status]


async def update_status(
    store: RecordStore[ScrapingJob],
    job_id: str,
    status: JobStatus,
    **fields,
) -> Optional[ScrapingJob]:
    """Move a job to ``status`` and set any extra fields on it.

    extra fields: start_time, end_time, events_found, error_message.
    Returns None for an unknown job; raises InvalidTransitionError when the
    move is not allowed (nothing leaves COMPLETED or FAILED). The check runs
    under the store lock against the status actually stored.
    """
    return await store.update(job_id, {**fields, "status": JobStatus(status)})


async def get_statistics(
    store: RecordStore[ScrapingJob], today: Optional[date] = None
) -> ScrapingJobStatistics:
    """Counts per status, events found, success rate and today's activity (UTC)."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    jobs = await store.find_all()
    by_status = Counter(j.status.value for j in jobs)
    todays = [j for j in jobs if j.created_at.date() == today]
    completed = by_status.get(JobStatus.COMPLETED.value, 0)
    return ScrapingJobStatistics(
        total_jobs=len(jobs),
        by_status={s.value: by_status.get(s.value, 0) for s in JobStatus},
        total_events_found=sum(j.events_found for j in jobs),
        success_rate=round(completed / len(jobs) * 100) if jobs else 0,
        jobs_today=len(todays),
        events_today=sum(j.events_found for j in todays),
    )
