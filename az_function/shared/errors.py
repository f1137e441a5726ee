"""Exceptions raised while talking to Airtable."""

import json
from typing import Any, Optional


class AirtableError(Exception):
    """Base class; ``status_code`` is the upstream HTTP status when one exists."""

    status_code: Optional[int] = None


class ConfigurationError(AirtableError):
    """A required setting is missing or malformed. Raised before any network call."""

    def __init__(self, variable: str, message: Optional[str] = None):
        self.variable = variable
        super().__init__(message or f"{variable} environment variable is not set")


class UpstreamError(AirtableError):
    """Airtable answered with a non-success status (or an unreadable body)."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        # Parsed JSON error object when the body was JSON, raw text otherwise.
        self.body = body
        detail = body if isinstance(body, str) else json.dumps(body, ensure_ascii=False)
        super().__init__(f"Airtable API error ({status_code}): {detail}")


class TransportError(AirtableError):
    """DNS failure, refused/reset connection, timeout."""


class TooManyPagesError(AirtableError):
    def __init__(self, max_pages: int):
        self.max_pages = max_pages
        super().__init__(f"Airtable returned more than {max_pages} pages; aborting")
