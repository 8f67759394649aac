from services.scraping import ScraperRegistry

from .feed_scraper import can_handle as feed_can_handle, scrape_feed

__all__ = ["feed_can_handle", "scrape_feed", "default_registry"]


def default_registry() -> ScraperRegistry:
    """Scraper registry used when automated scraping is enabled."""
    registry = ScraperRegistry()
    registry.register("JSON event feed", feed_can_handle, scrape_feed)
    return registry
