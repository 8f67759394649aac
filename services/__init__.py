"""Services composed from the record stores.

- dashboard: DashboardService (cross-kind statistics, recent activity)
- scraping: ScrapingService, ScraperRegistry (job lifecycle)
- browser: save_events (bulk save of browser-extracted events)
"""
from services.browser import save_events
from services.dashboard import DashboardService
from services.scraping import ScraperRegistry, ScrapingService

__all__ = ["DashboardService", "ScrapingService", "ScraperRegistry", "save_events"]
