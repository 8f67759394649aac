"""Aggregate statistics returned by the repositories and the dashboard."""
from typing import Dict

from pydantic import Field

from .base import CamelModel


class EventStatistics(CamelModel):
    total: int
    by_status: Dict[str, int]
    by_country: Dict[str, int]


class ContactStatistics(CamelModel):
    total: int
    verified: int
    by_status: Dict[str, int]


class OpportunityStatistics(CamelModel):
    total: int
    by_status: Dict[str, int]
    by_priority: Dict[str, int]
    total_estimated_value: float
    avg_match_score: float


class ScrapingJobStatistics(CamelModel):
    total_jobs: int
    by_status: Dict[str, int]
    total_events_found: int
    success_rate: int = Field(description="Completed jobs as a whole percentage")
    jobs_today: int
    events_today: int


class ScrapedEventStatistics(CamelModel):
    total: int
    by_country: Dict[str, int]


class RecentActivity(CamelModel):
    new_events: int
    new_contacts: int
    new_opportunities: int


class DashboardStats(CamelModel):
    events: EventStatistics
    contacts: ContactStatistics
    opportunities: OpportunityStatistics
    recent_activity: RecentActivity
