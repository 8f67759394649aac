from .base import (
    ContactStatus,
    EventStatus,
    JobStatus,
    OpportunityStatus,
    Priority,
)
from .event import Event, EventCreate, EventUpdate
from .contact import Contact, ContactCreate, ContactUpdate
from .opportunity import Opportunity, OpportunityCreate, OpportunityUpdate
from .scraping import (
    ScrapedEvent,
    ScrapedEventCreate,
    ScrapedEventUpdate,
    ScrapingJob,
    ScrapingJobCreate,
    ScrapingJobUpdate,
)
from .stats import (
    ContactStatistics,
    DashboardStats,
    EventStatistics,
    OpportunityStatistics,
    RecentActivity,
    ScrapedEventStatistics,
    ScrapingJobStatistics,
)
from .browser import ExtractedEvent, SaveEventsResult

__all__ = [
    "EventStatus", "ContactStatus", "OpportunityStatus", "Priority", "JobStatus",
    "Event", "EventCreate", "EventUpdate",
    "Contact", "ContactCreate", "ContactUpdate",
    "Opportunity", "OpportunityCreate", "OpportunityUpdate",
    "ScrapingJob", "ScrapingJobCreate", "ScrapingJobUpdate",
    "ScrapedEvent", "ScrapedEventCreate", "ScrapedEventUpdate",
    "EventStatistics", "ContactStatistics", "OpportunityStatistics",
    "ScrapingJobStatistics", "ScrapedEventStatistics", "RecentActivity", "DashboardStats",
    "ExtractedEvent", "SaveEventsResult",
]
