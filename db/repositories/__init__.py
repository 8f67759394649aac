"""Repository layer for the event lead portal.

One module per record kind. Each defines the kind's RecordKind (file, field
order, row decoding, creation defaults), an ``open_store`` helper, and async
query functions that take the store as their first argument:
- events: find_by_source_url, find_by_country, find_upcoming,
          find_by_date_range, get_statistics
- contacts: find_by_event, get_statistics
- opportunities: find_by_event, get_top, get_statistics
- scraping_jobs: find_by_status, update_status, get_statistics
- scraped_events: find_by_job, find_by_city, find_by_topic, get_statistics
"""
