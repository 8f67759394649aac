"""Scraping job and scraped event records."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import field_validator

from .base import CamelModel, JobStatus, require_http_url


class ScrapingJob(CamelModel):
    id: str
    url: str
    status: JobStatus
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    events_found: int = 0
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("url")
    @classmethod
    def _http_url(cls, value):
        return require_http_url(value)


class ScrapingJobCreate(CamelModel):
    url: str
    status: JobStatus = JobStatus.PENDING
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    events_found: int = 0
    error_message: Optional[str] = None

    @field_validator("url")
    @classmethod
    def _http_url(cls, value):
        return require_http_url(value)


class ScrapingJobUpdate(CamelModel):
    status: Optional[JobStatus] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    events_found: Optional[int] = None
    error_message: Optional[str] = None


class _ScrapedEventFields(CamelModel):
    scraping_job_id: str  # weak reference to ScrapingJob.id
    name: str
    description: Optional[str] = None
    url: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = "Switzerland"
    topic: Optional[str] = None
    organizer: Optional[str] = None
    website: Optional[str] = None
    raw_data: Optional[Dict[str, Any]] = None

    @field_validator("url", "website")
    @classmethod
    def _http_url(cls, value):
        return require_http_url(value)


class ScrapedEvent(_ScrapedEventFields):
    id: str
    created_at: datetime
    updated_at: datetime


class ScrapedEventCreate(_ScrapedEventFields):
    pass


class ScrapedEventUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    location: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    topic: Optional[str] = None
    organizer: Optional[str] = None
    website: Optional[str] = None
    raw_data: Optional[Dict[str, Any]] = None
