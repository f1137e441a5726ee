"""Shared code for the Airtable records function.

Exposes:
    AirtableConfig - query and credential settings loaded from the environment.
    fetch_page / fetch_all_records - single page and full paginated listing.
"""

from .airtable_client import Page, PageProgress, fetch_all_records, fetch_page
from .config import AirtableConfig
from .errors import (
    AirtableError,
    ConfigurationError,
    TooManyPagesError,
    TransportError,
    UpstreamError,
)

__all__ = [
    "AirtableConfig",
    "AirtableError",
    "ConfigurationError",
    "Page",
    "PageProgress",
    "TooManyPagesError",
    "TransportError",
    "UpstreamError",
    "fetch_all_records",
    "fetch_page",
]
