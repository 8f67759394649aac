"""Dashboard aggregation across the event, contact and opportunity stores."""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from db.repositories import contacts as contacts_repo
from db.repositories import events as events_repo
from db.repositories import opportunities as opportunities_repo
from db.store import RecordStore
from schemas import DashboardStats, RecentActivity

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(hours=24)


def _created_after(records, cutoff: datetime) -> int:
    return sum(1 for r in records if r.created_at > cutoff)


class DashboardService:
    """Builds one dashboard snapshot per call; nothing is cached."""

    def __init__(
        self,
        events: RecordStore,
        contacts: RecordStore,
        opportunities: RecordStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.events = events
        self.contacts = contacts
        self.opportunities = opportunities
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def get_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        """Per-kind statistics plus records created in the trailing 24 hours.

        All six reads run concurrently; any failure fails the whole snapshot.
        """
        (
            event_stats,
            contact_stats,
            opportunity_stats,
            all_events,
            all_contacts,
            all_opportunities,
        ) = await asyncio.gather(
            events_repo.get_statistics(self.events),
            contacts_repo.get_statistics(self.contacts),
            opportunities_repo.get_statistics(self.opportunities),
            self.events.find_all(),
            self.contacts.find_all(),
            self.opportunities.find_all(),
        )

        cutoff = (now or self._clock()) - RECENT_WINDOW
        recent = RecentActivity(
            new_events=_created_after(all_events, cutoff),
            new_contacts=_created_after(all_contacts, cutoff),
            new_opportunities=_created_after(all_opportunities, cutoff),
        )
        logger.debug("Dashboard snapshot: %s", recent)
        return DashboardStats(
            events=event_stats,
            contacts=contact_stats,
            opportunities=opportunity_stats,
            recent_activity=recent,
        )
